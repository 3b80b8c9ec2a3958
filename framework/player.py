"""Agent interface: anything outside the engine that supplies moves."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from .events import MatchEvent
from .move import Move
from .result import MatchResult
from .state import Observation


class Agent(ABC):
    """Base interface for scripted or human-controlled seats."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id

    def reset(self, game_id: str, player_id: str) -> None:
        """Prepare for a new match."""

    @abstractmethod
    def act(self, observation: Observation, legal_moves: Sequence[Any]) -> Move:
        """Return the next move for the observed state."""

    def on_rejected_move(self, error: Exception, observation: Observation) -> None:
        """Called when the engine refused the last move."""

    def on_game_end(self, result: MatchResult, history: Sequence[MatchEvent]) -> None:
        """Called once the match is over."""
