"""Terminal-driven human seat."""

from __future__ import annotations

from typing import Any, Callable

from ..errors import AgentExecutionError
from ..move import Move
from ..player import Agent


class HumanCLIController(Agent):
    """Prompts for a move on a terminal.

    `parse_input` turns the typed line into a move and raises `ValueError` on
    malformed input, which re-prompts. Whether the move is playable is left
    to the game, so a refused move comes back through `on_rejected_move`.
    """

    def __init__(
        self,
        agent_id: str,
        parse_input: Callable[[str], Move],
        render: Callable[[Any], str] | None = None,
        *,
        prompt: str = "Your move: ",
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        super().__init__(agent_id=agent_id)
        self.parse_input = parse_input
        self.render = render
        self.prompt = prompt
        self._input = input_fn
        self._output = output_fn

    def act(self, observation: Any, legal_moves: Any) -> Move:
        if self.render is not None:
            self._output(self.render(observation))
        while True:
            try:
                raw = self._input(self.prompt)
            except EOFError as exc:
                raise AgentExecutionError(self.agent_id, "Input closed.") from exc
            try:
                return self.parse_input(raw)
            except ValueError as exc:
                self._output(str(exc))

    def on_rejected_move(self, error: Exception, observation: Any) -> None:
        reason = getattr(error, "reason", None) or str(error)
        self._output(f"Move refused ({reason}), try again.")
