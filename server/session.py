"""In-memory match sessions for the local API.

Each session owns one `Board`. Validation, mutation and evaluation of a move
happen under the session lock so concurrent requests cannot interleave.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from uuid import uuid4

from framework.errors import IllegalMoveError
from framework.events import EventType, MatchEvent, write_jsonl
from tictacchess.board import Board, MoveRejectedError, Player
from tictacchess.game import GAME_OVER, termination_reason_for
from tictacchess.moves import PlaceMark
from tictacchess.outcome import Outcome, evaluate
from tictacchess.presentation import PLAYER_COLORS, PLAYER_GLYPHS, announce

logger = logging.getLogger(__name__)

REJECT_SILENT = "silent"
REJECT_REPORT = "report"
SUPPORTED_REJECT_POLICIES = {REJECT_SILENT, REJECT_REPORT}


def _serialize_cells(board: Board) -> list[list[str | None]]:
    snapshot = board.snapshot()
    return [[cell.value if cell is not None else None for cell in row] for row in snapshot.cells]


@dataclass
class MatchSession:
    """One board plus its event history, possibly spanning several games."""

    match_id: str
    reject_policy: str
    auto_reset: bool
    board: Board = field(default_factory=Board)
    events: list[MatchEvent] = field(default_factory=list)
    game_number: int = 1
    last_result: dict[str, Any] | None = None
    event_log_dir: Path | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def create(
        cls,
        *,
        reject_policy: str = REJECT_SILENT,
        auto_reset: bool = False,
        event_log_dir: Path | None = None,
    ) -> "MatchSession":
        if reject_policy not in SUPPORTED_REJECT_POLICIES:
            raise ValueError(
                f"reject_policy must be one of {sorted(SUPPORTED_REJECT_POLICIES)}; received {reject_policy!r}."
            )
        session = cls(
            match_id=f"match-{uuid4().hex[:10]}",
            reject_policy=reject_policy,
            auto_reset=auto_reset,
            event_log_dir=event_log_dir,
        )
        session._emit(
            EventType.MATCH_START,
            {
                "reject_policy": reject_policy,
                "auto_reset": auto_reset,
                "current_player": session.board.current_player.value,
            },
        )
        return session

    def view(self) -> dict[str, Any]:
        """Return the board, whose turn it is and the current outcome."""
        with self._lock:
            return self._view_locked()

    def submit_move(self, row: int, col: int) -> dict[str, Any]:
        """Apply a move for the player to move, then evaluate the board.

        A refused move leaves the board untouched. Under the `silent` policy
        the caller gets the unchanged view back with a `rejected` code; under
        `report` the `MoveRejectedError` propagates.
        """
        with self._lock:
            player = self.board.current_player
            move = PlaceMark(row=row, col=col)
            if evaluate(self.board).is_terminal:
                raise IllegalMoveError(player.value, move, GAME_OVER)

            try:
                self.board.apply_move(row, col)
            except MoveRejectedError as exc:
                logger.debug("%s: rejected %s for %s (%s)", self.match_id, (row, col), player.value, exc.error.value)
                self._emit(
                    EventType.REJECTED_MOVE,
                    {"player_id": player.value, "move": move.to_dict(), "reason": exc.error.value},
                )
                if self.reject_policy == REJECT_REPORT:
                    raise
                payload = self._view_locked()
                payload["rejected"] = exc.error.value
                return payload

            self._emit(
                EventType.TURN,
                {
                    "player_id": player.value,
                    "move": move.to_dict(),
                    "summary": f"{player.value} marked ({row}, {col}).",
                    "state_digest": self.board.snapshot().state_digest(),
                },
            )
            outcome = evaluate(self.board)
            if outcome.is_terminal:
                self._record_terminal(outcome)
                if self.auto_reset:
                    self._reset_locked()
            return self._view_locked()

    def reset(self) -> dict[str, Any]:
        """Clear the board; hosts call this once a finished game has been acknowledged."""
        with self._lock:
            self._reset_locked()
            return self._view_locked()

    def _record_terminal(self, outcome: Outcome) -> None:
        reason = termination_reason_for(outcome)
        self.last_result = {
            "game_number": self.game_number,
            "outcome": outcome.to_dict(),
            "termination_reason": reason.value,
            "announcement": announce(outcome),
            "cells": _serialize_cells(self.board),
            "moves": self.board.move_count,
        }
        self._emit(EventType.TERMINAL, {"result": self.last_result})
        logger.info(
            "%s game %d finished: %s",
            self.match_id,
            self.game_number,
            self.last_result["announcement"],
        )
        if self.event_log_dir is not None:
            write_jsonl(self.event_log_dir / f"{self.match_id}.jsonl", self.events)

    def _reset_locked(self) -> None:
        finished = self.board.move_count
        self.board.reset()
        self.game_number += 1
        self._emit(EventType.RESET, {"moves_cleared": finished, "game_number": self.game_number})
        logger.info("%s reset for game %d", self.match_id, self.game_number)

    def _emit(self, event_type: EventType, payload: dict[str, Any]) -> None:
        self.events.append(
            MatchEvent.create(
                event_type=event_type,
                game_id=self.match_id,
                turn=self.board.move_count,
                payload=payload,
            )
        )

    def _view_locked(self) -> dict[str, Any]:
        snapshot = self.board.snapshot()
        outcome = evaluate(snapshot)
        return {
            "match_id": self.match_id,
            "game_number": self.game_number,
            "cells": _serialize_cells(self.board),
            "current_player": snapshot.current_player.value,
            "move_count": snapshot.move_count,
            "outcome": outcome.to_dict(),
            "announcement": announce(outcome),
            "terminal": outcome.is_terminal,
            "legal_cells": [] if outcome.is_terminal else [list(cell) for cell in snapshot.empty_cells()],
            "players": {
                player.value: {"glyph": PLAYER_GLYPHS[player], "color": PLAYER_COLORS[player]}
                for player in Player
            },
            "reject_policy": self.reject_policy,
            "auto_reset": self.auto_reset,
            "last_result": self.last_result,
        }


class SessionStore:
    """In-memory session dictionary keyed by match ID."""

    def __init__(self, event_log_dir: Path | None = None) -> None:
        self._sessions: dict[str, MatchSession] = {}
        self._lock = threading.Lock()
        self.event_log_dir = event_log_dir

    def create_match(self, *, reject_policy: str = REJECT_SILENT, auto_reset: bool = False) -> MatchSession:
        session = MatchSession.create(
            reject_policy=reject_policy,
            auto_reset=auto_reset,
            event_log_dir=self.event_log_dir,
        )
        with self._lock:
            self._sessions[session.match_id] = session
        logger.info("Created %s (reject_policy=%s auto_reset=%s)", session.match_id, reject_policy, auto_reset)
        return session

    def get(self, match_id: str) -> MatchSession:
        with self._lock:
            if match_id not in self._sessions:
                raise KeyError(match_id)
            return self._sessions[match_id]

    def remove(self, match_id: str) -> MatchSession:
        """Forget a match; raises `KeyError` if it is unknown."""
        with self._lock:
            session = self._sessions.pop(match_id)
        logger.info("Removed %s after %d game(s)", match_id, session.game_number)
        return session

    def all_events(self, match_id: str) -> list[dict[str, Any]]:
        session = self.get(match_id)
        return [event.to_dict() for event in session.events]
