"""Scripted agent: replays moves supplied by the caller."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from ..errors import AgentExecutionError
from ..move import Move
from ..player import Agent


class ScriptedAgent(Agent):
    """Plays a fixed list of moves in order, or delegates to a policy callable.

    Refused moves are not retried: the next scripted move is offered instead,
    which mirrors a player tapping again after a tap was ignored.
    """

    def __init__(
        self,
        agent_id: str,
        moves: Iterable[Move] | None = None,
        policy: Callable[[Any, Any], Move] | None = None,
    ):
        super().__init__(agent_id=agent_id)
        if moves is not None and policy is not None:
            raise ValueError("ScriptedAgent takes either moves or policy, not both.")
        self._script: list[Move] = list(moves or [])
        self._cursor = 0
        self.policy = policy

    @property
    def remaining(self) -> int:
        return len(self._script) - self._cursor

    def reset(self, game_id: str, player_id: str) -> None:
        """Rewind the script so the same agent can replay a new match."""
        self._cursor = 0

    def act(self, observation: Any, legal_moves: Any) -> Move:
        if self.policy is not None:
            return self.policy(observation, legal_moves)
        if self._cursor >= len(self._script):
            raise AgentExecutionError(self.agent_id, "Scripted moves exhausted.")
        move = self._script[self._cursor]
        self._cursor += 1
        return move
