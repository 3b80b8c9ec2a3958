"""Structured exceptions shared by the engine, runner and server."""

from __future__ import annotations

from typing import Any


class GameError(Exception):
    """Base class for game and match exceptions."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


class MatchConfigurationError(GameError):
    """Raised when a match is wired up incorrectly (missing seats, bad policy)."""


class IllegalMoveError(GameError):
    """Raised when a seat submits a move the game refuses."""

    def __init__(self, player_id: str, move: Any, reason: str | None = None):
        self.player_id = player_id
        self.move = move
        self.reason = reason
        message = f"Illegal move by {player_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        move = self.move.to_dict() if hasattr(self.move, "to_dict") else self.move
        payload.update({"player_id": self.player_id, "move": move})
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


class AgentExecutionError(GameError):
    """Raised when a move source fails to produce a move."""

    def __init__(self, player_id: str, message: str):
        self.player_id = player_id
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["player_id"] = self.player_id
        return payload
