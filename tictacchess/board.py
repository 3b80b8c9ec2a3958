"""The 4x4 board: cell ownership, turn marker and move validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Self

from framework.errors import GameError
from framework.state import State

BOARD_SIZE = 4
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


class Player(str, Enum):
    """The two marks."""

    X = "X"
    O = "O"

    @property
    def other(self) -> "Player":
        return Player.O if self is Player.X else Player.X


STARTING_PLAYER = Player.X

Cell = Player | None
Grid = tuple[tuple[Cell, ...], ...]


class MoveError(str, Enum):
    """Reasons a move is refused."""

    OUT_OF_BOUNDS = "out_of_bounds"
    CELL_OCCUPIED = "cell_occupied"


class MoveRejectedError(GameError):
    """Raised by `Board.apply_move` when the move is refused; the board is untouched."""

    def __init__(self, error: MoveError, row: Any, col: Any):
        self.error = error
        self.row = row
        self.col = col
        if error is MoveError.OUT_OF_BOUNDS:
            message = f"({row}, {col}) is outside the {BOARD_SIZE}x{BOARD_SIZE} board"
        else:
            message = f"({row}, {col}) is already marked"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"error": self.error.value, "row": self.row, "col": self.col})
        return payload


def _empty_grid() -> Grid:
    return tuple(tuple(None for _ in range(BOARD_SIZE)) for _ in range(BOARD_SIZE))


def in_bounds(row: Any, col: Any) -> bool:
    """Return whether `(row, col)` names a cell. Bools and non-ints never do."""
    for value in (row, col):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        if not 0 <= value < BOARD_SIZE:
            return False
    return True


@dataclass(frozen=True)
class BoardSnapshot(State):
    """Read-only copy of a board at one point in time."""

    cells: Grid
    current_player: Player
    move_count: int = 0

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def marks(self) -> int:
        """Count marked cells."""
        return sum(1 for row in self.cells for cell in row if cell is not None)

    def empty_cells(self) -> list[tuple[int, int]]:
        """Return empty coordinates in row-major order."""
        return [
            (row, col)
            for row in range(BOARD_SIZE)
            for col in range(BOARD_SIZE)
            if self.cells[row][col] is None
        ]

    def is_full(self) -> bool:
        return self.marks() == CELL_COUNT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Rebuild a snapshot from its `to_dict()` form."""
        raw_cells = data["cells"]
        if len(raw_cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in raw_cells):
            raise ValueError(f"cells must be a {BOARD_SIZE}x{BOARD_SIZE} grid.")
        cells = tuple(
            tuple(Player(value) if value is not None else None for value in row)
            for row in raw_cells
        )
        return cls(
            cells=cells,
            current_player=Player(data["current_player"]),
            move_count=int(data.get("move_count", 0)),
        )


class Board:
    """Mutable game board. All state changes go through `apply_move` and `reset`."""

    def __init__(self) -> None:
        self._cells: list[list[Cell]] = []
        self._current_player = STARTING_PLAYER
        self._move_count = 0
        self.reset()

    @classmethod
    def from_snapshot(cls, snapshot: BoardSnapshot) -> "Board":
        board = cls()
        board._cells = [list(row) for row in snapshot.cells]
        board._current_player = snapshot.current_player
        board._move_count = snapshot.move_count
        return board

    @property
    def current_player(self) -> Player:
        return self._current_player

    @property
    def move_count(self) -> int:
        return self._move_count

    def cell(self, row: int, col: int) -> Cell:
        return self._cells[row][col]

    def check_move(self, row: Any, col: Any) -> MoveError | None:
        """Return why `(row, col)` would be refused, or None if it is playable."""
        if not in_bounds(row, col):
            return MoveError.OUT_OF_BOUNDS
        if self._cells[row][col] is not None:
            return MoveError.CELL_OCCUPIED
        return None

    def apply_move(self, row: Any, col: Any) -> None:
        """Mark `(row, col)` for the current player and hand the turn over.

        Raises `MoveRejectedError` without touching the board when the
        coordinates are off the grid or the cell is already marked. Outcome
        evaluation and resetting are left to the caller.
        """
        error = self.check_move(row, col)
        if error is not None:
            raise MoveRejectedError(error, row, col)
        self._cells[row][col] = self._current_player
        self._current_player = self._current_player.other
        self._move_count += 1

    def reset(self) -> None:
        """Clear every cell and give the turn back to the starting player."""
        self._cells = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self._current_player = STARTING_PLAYER
        self._move_count = 0

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            cells=tuple(tuple(row) for row in self._cells),
            current_player=self._current_player,
            move_count=self._move_count,
        )

    def __repr__(self) -> str:
        return f"Board(current_player={self._current_player.value}, move_count={self._move_count})"


def empty_snapshot() -> BoardSnapshot:
    """Snapshot of a freshly reset board."""
    return BoardSnapshot(cells=_empty_grid(), current_player=STARTING_PLAYER, move_count=0)
