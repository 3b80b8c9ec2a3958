"""Game interface for two-seat, alternating-turn games."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Sequence, TypeVar

from .move import Move
from .result import MatchResult
from .state import Observation

PlayerId = str
StateT = TypeVar("StateT")
MoveT = TypeVar("MoveT", bound=Move)
ObservationT = TypeVar("ObservationT", bound=Observation)


class Game(ABC, Generic[StateT, MoveT, ObservationT]):
    """Functional view of a game: every transition returns a new state."""

    game_name: str = "game"

    @abstractmethod
    def new_game(self) -> StateT:
        """Return the starting state."""

    @abstractmethod
    def player_ids(self, state: StateT) -> Sequence[PlayerId]:
        """Return every seat in turn order."""

    @abstractmethod
    def current_player(self, state: StateT) -> PlayerId:
        """Return the seat whose turn it is."""

    @abstractmethod
    def legal_moves(self, state: StateT, player_id: PlayerId) -> Sequence[MoveT]:
        """Enumerate moves `player_id` may submit in `state`."""

    @abstractmethod
    def check_move(self, state: StateT, player_id: PlayerId, move: MoveT) -> tuple[bool, str | None]:
        """Return whether a move is accepted, with a reason code when it is not."""

    @abstractmethod
    def apply_move(self, state: StateT, player_id: PlayerId, move: MoveT) -> StateT:
        """Apply an accepted move and return the next state."""

    @abstractmethod
    def is_terminal(self, state: StateT) -> bool:
        """Return whether no further moves should be taken."""

    @abstractmethod
    def outcome(self, state: StateT) -> MatchResult:
        """Summarize a terminal state as a `MatchResult`."""

    @abstractmethod
    def observation(self, state: StateT, player_id: PlayerId) -> ObservationT:
        """Return what `player_id` is shown."""

    @abstractmethod
    def render(self, state: StateT) -> str:
        """Render the state as text for terminals and logs."""

    def parse_move(self, data: Mapping[str, Any]) -> MoveT:
        """Parse a move payload supplied from outside the process."""
        raise NotImplementedError(f"{self.__class__.__name__} does not implement parse_move().")

    def forfeit_winner(self, state: StateT, offending_player_id: PlayerId) -> PlayerId | None:
        """Return the winner when `offending_player_id` forfeits. Default: no winner."""
        return None
