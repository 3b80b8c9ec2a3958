"""Match result model and termination reasons."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Self

from .serialize import to_serializable


class TerminationReason(str, Enum):
    """Why a match stopped."""

    LINE_COMPLETED = "line_completed"
    BOARD_FULL = "board_full"
    FORCED_DRAW = "forced_draw"
    REJECTED_MOVE_FORFEIT = "rejected_move_forfeit"
    AGENT_EXCEPTION = "agent_exception"
    ABANDONED = "abandoned"
    MAX_TURNS = "max_turns"


@dataclass(frozen=True)
class MatchResult:
    """Structured outcome for a finished match."""

    game_id: str
    game_name: str
    winner: str | None
    termination_reason: TerminationReason
    turns: int = 0
    winning_line: str | None = None
    stats: dict[str, Any] = field(default_factory=dict)
    details: str | None = None
    final_state_digest: str | None = None
    event_count: int = 0
    log_path: str | None = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None and self.termination_reason in {
            TerminationReason.BOARD_FULL,
            TerminationReason.FORCED_DRAW,
        }

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable result object."""
        return {
            "game_id": self.game_id,
            "game_name": self.game_name,
            "winner": self.winner,
            "termination_reason": self.termination_reason.value,
            "turns": self.turns,
            "winning_line": self.winning_line,
            "stats": to_serializable(self.stats),
            "details": self.details,
            "final_state_digest": self.final_state_digest,
            "event_count": self.event_count,
            "log_path": self.log_path,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a result from serialized data."""
        return cls(
            game_id=str(data["game_id"]),
            game_name=str(data["game_name"]),
            winner=data.get("winner"),
            termination_reason=TerminationReason(str(data["termination_reason"])),
            turns=int(data.get("turns", 0)),
            winning_line=data.get("winning_line"),
            stats=dict(data.get("stats", {})),
            details=data.get("details"),
            final_state_digest=data.get("final_state_digest"),
            event_count=int(data.get("event_count", 0)),
            log_path=data.get("log_path"),
        )
