"""Turn-based match machinery: games, moves, agents, runner and event logs."""

from .errors import AgentExecutionError, GameError, IllegalMoveError, MatchConfigurationError
from .events import EventType, MatchEvent
from .game import Game, PlayerId
from .move import Move
from .player import Agent
from .result import MatchResult, TerminationReason
from .runner import MatchRun, MatchRunner, RunnerConfig
from .state import Observation, State

__all__ = [
    "Agent",
    "AgentExecutionError",
    "EventType",
    "Game",
    "GameError",
    "IllegalMoveError",
    "MatchConfigurationError",
    "MatchEvent",
    "MatchResult",
    "MatchRun",
    "MatchRunner",
    "Move",
    "Observation",
    "PlayerId",
    "RunnerConfig",
    "State",
    "TerminationReason",
]
