"""Tic Tac Chess: four-in-a-line on a 4x4 board."""

from .board import (
    BOARD_SIZE,
    CELL_COUNT,
    STARTING_PLAYER,
    Board,
    BoardSnapshot,
    MoveError,
    MoveRejectedError,
    Player,
)
from .game import TicTacChessGame
from .lines import LINES, Line
from .moves import MoveType, PlaceMark
from .observation import TicTacChessObservation
from .outcome import Outcome, OutcomeStatus, evaluate, is_forced_draw, live_lines, winning_line

__all__ = [
    "BOARD_SIZE",
    "Board",
    "BoardSnapshot",
    "CELL_COUNT",
    "LINES",
    "Line",
    "MoveError",
    "MoveRejectedError",
    "MoveType",
    "Outcome",
    "OutcomeStatus",
    "PlaceMark",
    "Player",
    "STARTING_PLAYER",
    "TicTacChessGame",
    "TicTacChessObservation",
    "evaluate",
    "is_forced_draw",
    "live_lines",
    "winning_line",
]
