"""Observation model for Tic Tac Chess (both seats see the whole board)."""

from __future__ import annotations

from dataclasses import dataclass

from framework.state import Observation


@dataclass(frozen=True)
class TicTacChessObservation(Observation):
    """What a seat is shown before it moves."""

    player_id: str
    current_player: str
    cells: tuple[tuple[str | None, ...], ...]
    move_count: int
    status: str
    winner: str | None
    winning_line: str | None
    forced_draw: bool
    legal_cells: tuple[tuple[int, int], ...]
