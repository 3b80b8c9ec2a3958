"""The ten winning lines: four rows, four columns and the two full diagonals."""

from __future__ import annotations

from dataclasses import dataclass

from .board import BOARD_SIZE

Coordinate = tuple[int, int]


@dataclass(frozen=True)
class Line:
    """Four cells that win the game when one player holds all of them."""

    name: str
    cells: tuple[Coordinate, ...]


def _build_lines() -> tuple[Line, ...]:
    span = range(BOARD_SIZE)
    rows = [Line(f"row-{row}", tuple((row, col) for col in span)) for row in span]
    columns = [Line(f"col-{col}", tuple((row, col) for row in span)) for col in span]
    diagonals = [
        Line("diag-main", tuple((index, index) for index in span)),
        Line("diag-anti", tuple((index, BOARD_SIZE - 1 - index) for index in span)),
    ]
    return tuple(rows + columns + diagonals)


# Evaluation order: rows, columns, then diagonals.
LINES: tuple[Line, ...] = _build_lines()

LINES_BY_NAME: dict[str, Line] = {line.name: line for line in LINES}
