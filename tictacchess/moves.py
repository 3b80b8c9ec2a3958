"""Move definitions for Tic Tac Chess."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from framework.move import Move


class MoveType(str, Enum):
    """Supported move discriminators."""

    PLACE_MARK = "PlaceMark"


@dataclass(frozen=True)
class PlaceMark(Move):
    """Mark one cell for the seat to move.

    Coordinates are not range-checked here; the board reports off-grid
    coordinates as `out_of_bounds`.
    """

    row: int
    col: int
    move_type = MoveType.PLACE_MARK.value


def _coordinate(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool):
        raise ValueError(f"PlaceMark.{key} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"PlaceMark.{key} must be an integer.")


def move_from_dict(data: Mapping[str, Any]) -> PlaceMark:
    """Parse a PlaceMark payload.

    Accepts `{"row", "col"}`, the `{"x", "z"}` pair used by scene hit-tests, or
    `{"cell": [row, col]}`.
    """
    move_type = data.get("type") or data.get("move_type") or MoveType.PLACE_MARK.value
    if move_type != MoveType.PLACE_MARK.value:
        raise ValueError(f"Unknown Tic Tac Chess move type: {move_type!r}")

    if "cell" in data:
        cell = data["cell"]
        if not isinstance(cell, (list, tuple)) or len(cell) != 2:
            raise ValueError("PlaceMark.cell must be a [row, col] pair.")
        data = {"row": cell[0], "col": cell[1]}
    elif "row" not in data and "x" in data and "z" in data:
        data = {"row": data["x"], "col": data["z"]}

    return PlaceMark(row=_coordinate(data, "row"), col=_coordinate(data, "col"))
