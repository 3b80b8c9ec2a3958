"""Move sources for the match runner."""

from .human_cli_controller import HumanCLIController
from .scripted_agent import ScriptedAgent

__all__ = [
    "HumanCLIController",
    "ScriptedAgent",
]
