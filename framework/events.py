"""Replay events and the JSONL writer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from time import time
from typing import Any, Iterable, Mapping

from .serialize import json_dumps, to_serializable


class EventType(str, Enum):
    """Kinds of event emitted by runners and sessions."""

    MATCH_START = "match_start"
    TURN = "turn"
    REJECTED_MOVE = "rejected_move"
    AGENT_ERROR = "agent_error"
    TERMINAL = "terminal"
    RESET = "reset"


@dataclass(frozen=True)
class MatchEvent:
    """One replay row."""

    event_type: EventType
    game_id: str
    turn: int
    timestamp_ms: int
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable event data."""
        return {
            "event_type": self.event_type.value,
            "game_id": self.game_id,
            "turn": self.turn,
            "timestamp_ms": self.timestamp_ms,
            "payload": to_serializable(self.payload),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchEvent":
        """Build an event from a dictionary payload."""
        return cls(
            event_type=EventType(str(data["event_type"])),
            game_id=str(data["game_id"]),
            turn=int(data["turn"]),
            timestamp_ms=int(data["timestamp_ms"]),
            payload=dict(data.get("payload", {})),
        )

    @classmethod
    def create(cls, event_type: EventType, game_id: str, turn: int, payload: dict[str, Any]) -> "MatchEvent":
        """Stamp an event with the current wall-clock time."""
        return cls(
            event_type=event_type,
            game_id=game_id,
            turn=turn,
            timestamp_ms=int(time() * 1000),
            payload=payload,
        )


def write_jsonl(path: str | Path, events: Iterable[MatchEvent]) -> Path:
    """Write events one JSON object per line, creating parent directories."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        for event in events:
            handle.write(json_dumps(event.to_dict()))
            handle.write("\n")
    return output_path


def read_jsonl(path: str | Path) -> list[MatchEvent]:
    """Load events previously written by `write_jsonl`."""
    events: list[MatchEvent] = []
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                events.append(MatchEvent.from_dict(json.loads(line)))
    return events
