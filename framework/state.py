"""Frozen, serializable bases for game states and per-seat observations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .serialize import digest, to_serializable


@dataclass(frozen=True)
class State:
    """Immutable game state with serialization helpers."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return to_serializable(self)

    def state_digest(self) -> str:
        """Return a deterministic digest used in event logs."""
        return digest(self.to_dict())


@dataclass(frozen=True)
class Observation:
    """What one seat is shown before it moves."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return to_serializable(self)

    def observation_digest(self) -> str:
        """Return a deterministic digest used in event logs."""
        return digest(self.to_dict())
