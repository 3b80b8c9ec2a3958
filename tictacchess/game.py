"""Functional `Game` adapter over the mutable board and the outcome evaluator."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from framework.errors import IllegalMoveError
from framework.game import Game
from framework.result import MatchResult, TerminationReason

from .board import Board, BoardSnapshot, Player, empty_snapshot
from .moves import PlaceMark, move_from_dict
from .observation import TicTacChessObservation
from .outcome import Outcome, OutcomeStatus, evaluate
from .presentation import glyph, render_board

NOT_YOUR_TURN = "not_your_turn"
GAME_OVER = "game_over"
UNSUPPORTED_MOVE = "unsupported_move"


def termination_reason_for(outcome: Outcome) -> TerminationReason:
    """Map a terminal outcome onto the shared termination reasons."""
    if outcome.status is OutcomeStatus.WON:
        return TerminationReason.LINE_COMPLETED
    if outcome.status is OutcomeStatus.DRAW:
        return TerminationReason.FORCED_DRAW if outcome.forced else TerminationReason.BOARD_FULL
    raise ValueError("Outcome is not terminal.")


class TicTacChessGame(Game[BoardSnapshot, PlaceMark, TicTacChessObservation]):
    """Two seats, X and O, alternating marks on a 4x4 board."""

    game_name = "tictacchess"

    def new_game(self) -> BoardSnapshot:
        return empty_snapshot()

    def player_ids(self, state: BoardSnapshot) -> Sequence[str]:
        return (Player.X.value, Player.O.value)

    def current_player(self, state: BoardSnapshot) -> str:
        return state.current_player.value

    def legal_moves(self, state: BoardSnapshot, player_id: str) -> list[PlaceMark]:
        """Every empty cell, for the seat to move, while the game is undecided."""
        if player_id != state.current_player.value or self.is_terminal(state):
            return []
        return [PlaceMark(row=row, col=col) for row, col in state.empty_cells()]

    def check_move(self, state: BoardSnapshot, player_id: str, move: Any) -> tuple[bool, str | None]:
        if self.is_terminal(state):
            return False, GAME_OVER
        if player_id != state.current_player.value:
            return False, NOT_YOUR_TURN
        if not isinstance(move, PlaceMark):
            return False, UNSUPPORTED_MOVE
        error = Board.from_snapshot(state).check_move(move.row, move.col)
        if error is not None:
            return False, error.value
        return True, None

    def apply_move(self, state: BoardSnapshot, player_id: str, move: PlaceMark) -> BoardSnapshot:
        """Return the snapshot after `move`.

        Seat and game-over problems raise `IllegalMoveError`; a refused cell
        raises `MoveRejectedError` from the board.
        """
        if self.is_terminal(state):
            raise IllegalMoveError(player_id, move, GAME_OVER)
        if player_id != state.current_player.value:
            raise IllegalMoveError(player_id, move, NOT_YOUR_TURN)
        if not isinstance(move, PlaceMark):
            raise IllegalMoveError(player_id, move, UNSUPPORTED_MOVE)
        board = Board.from_snapshot(state)
        board.apply_move(move.row, move.col)
        return board.snapshot()

    def is_terminal(self, state: BoardSnapshot) -> bool:
        return evaluate(state).is_terminal

    def outcome(self, state: BoardSnapshot) -> MatchResult:
        result = evaluate(state)
        return MatchResult(
            game_id="",
            game_name=self.game_name,
            winner=result.winner.value if result.winner is not None else None,
            termination_reason=termination_reason_for(result),
            turns=state.move_count,
            winning_line=result.line,
            stats={"marks": state.marks(), "empty_cells": len(state.empty_cells())},
            details=result.status.value,
            final_state_digest=state.state_digest(),
        )

    def observation(self, state: BoardSnapshot, player_id: str) -> TicTacChessObservation:
        result = evaluate(state)
        return TicTacChessObservation(
            player_id=player_id,
            current_player=state.current_player.value,
            cells=tuple(tuple(cell.value if cell is not None else None for cell in row) for row in state.cells),
            move_count=state.move_count,
            status=result.status.value,
            winner=result.winner.value if result.winner is not None else None,
            winning_line=result.line,
            forced_draw=result.forced,
            legal_cells=tuple(state.empty_cells()) if not result.is_terminal else tuple(),
        )

    def render(self, state: BoardSnapshot) -> str:
        return render_board(state)

    def parse_move(self, data: Mapping[str, Any]) -> PlaceMark:
        return move_from_dict(data)

    def forfeit_winner(self, state: BoardSnapshot, offending_player_id: str) -> str | None:
        """The other seat wins when one seat forfeits."""
        return Player(offending_player_id).other.value

    def describe_move(self, player_id: str, move: PlaceMark, after: BoardSnapshot) -> str:
        """One-line summary for event logs."""
        mark = glyph(after.cell(move.row, move.col))
        return f"{player_id} marked ({move.row}, {move.col}) with {mark}."
