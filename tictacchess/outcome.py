"""Win, draw and in-progress classification of a board.

Everything here is a pure function of a `BoardSnapshot`. Nothing is cached on
the board: callers evaluate again after every accepted move.

Besides the usual win and full-board checks, `evaluate` detects a forced draw:
once every line holds at least one mark from each player, nobody can complete
a line any more and the game is over even with empty cells left.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .board import Board, BoardSnapshot, Player
from .lines import LINES, Line

# Order in which players are tested for live lines.
PLAYER_ORDER: tuple[Player, Player] = (Player.X, Player.O)


class OutcomeStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating one board position."""

    status: OutcomeStatus
    winner: Player | None = None
    line: str | None = None
    forced: bool = False

    @classmethod
    def in_progress(cls) -> "Outcome":
        return cls(status=OutcomeStatus.IN_PROGRESS)

    @classmethod
    def won(cls, player: Player, line: str) -> "Outcome":
        return cls(status=OutcomeStatus.WON, winner=player, line=line)

    @classmethod
    def draw(cls, *, forced: bool) -> "Outcome":
        return cls(status=OutcomeStatus.DRAW, forced=forced)

    @property
    def is_terminal(self) -> bool:
        return self.status is not OutcomeStatus.IN_PROGRESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "winner": self.winner.value if self.winner is not None else None,
            "line": self.line,
            "forced": self.forced,
        }


def _as_snapshot(board: Board | BoardSnapshot) -> BoardSnapshot:
    if isinstance(board, Board):
        return board.snapshot()
    return board


def winning_line(snapshot: BoardSnapshot) -> tuple[Line, Player] | None:
    """Return the first completed line and its owner, scanning rows, columns, diagonals."""
    for line in LINES:
        owners = {snapshot.cell(row, col) for row, col in line.cells}
        if len(owners) == 1:
            (owner,) = owners
            if owner is not None:
                return line, owner
    return None


def is_live(snapshot: BoardSnapshot, line: Line, player: Player) -> bool:
    """A line is live for `player` while the opponent has no mark on it."""
    opponent = player.other
    return all(snapshot.cell(row, col) is not opponent for row, col in line.cells)


def live_lines(snapshot: BoardSnapshot, player: Player) -> list[Line]:
    """Lines `player` could still complete."""
    return [line for line in LINES if is_live(snapshot, line, player)]


def is_forced_draw(snapshot: BoardSnapshot) -> bool:
    """True when no line is live for either player."""
    for player in PLAYER_ORDER:
        if any(is_live(snapshot, line, player) for line in LINES):
            return False
    return True


def evaluate(board: Board | BoardSnapshot) -> Outcome:
    """Classify a board as won, drawn or still in progress."""
    snapshot = _as_snapshot(board)

    completed = winning_line(snapshot)
    if completed is not None:
        line, player = completed
        return Outcome.won(player, line.name)

    if snapshot.is_full():
        return Outcome.draw(forced=False)

    if is_forced_draw(snapshot):
        return Outcome.draw(forced=True)

    return Outcome.in_progress()
