"""Cosmetic lookups and text output. The engine never imports this module."""

from __future__ import annotations

from .board import BOARD_SIZE, BoardSnapshot, Player
from .outcome import Outcome, OutcomeStatus

PLAYER_GLYPHS: dict[Player, str] = {
    Player.X: "X",
    Player.O: "O",
}

PLAYER_COLORS: dict[Player, str] = {
    Player.X: "red",
    Player.O: "blue",
}

EMPTY_GLYPH = "."


def glyph(cell: Player | None) -> str:
    return PLAYER_GLYPHS[cell] if cell is not None else EMPTY_GLYPH


def render_board(snapshot: BoardSnapshot) -> str:
    """Render the grid with row/column indices and the player to move."""
    header = "    " + "   ".join(str(col) for col in range(BOARD_SIZE))
    divider = "   " + "+".join(["---"] * BOARD_SIZE)
    lines = [f"to move: {PLAYER_GLYPHS[snapshot.current_player]}", header]
    for row in range(BOARD_SIZE):
        cells = " | ".join(glyph(snapshot.cell(row, col)) for col in range(BOARD_SIZE))
        lines.append(f"{row}   {cells}")
        if row < BOARD_SIZE - 1:
            lines.append(divider)
    return "\n".join(lines)


def announce(outcome: Outcome) -> str | None:
    """Message shown to players when a game ends."""
    if outcome.status is OutcomeStatus.WON and outcome.winner is not None:
        return f"Player {PLAYER_GLYPHS[outcome.winner]} wins!"
    if outcome.status is OutcomeStatus.DRAW:
        return "The game ended in a draw."
    return None
