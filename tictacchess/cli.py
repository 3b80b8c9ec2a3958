"""Command-line entry point: hot-seat play on a terminal, or replay a move list."""

from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path
from typing import Sequence

from framework.agents import HumanCLIController, ScriptedAgent
from framework.runner import REJECTED_MOVE_POLICIES, REJECT_IGNORE, MatchRun, MatchRunner, RunnerConfig
from framework.serialize import json_dumps

from .board import BoardSnapshot, Player
from .game import TicTacChessGame
from .moves import PlaceMark
from .observation import TicTacChessObservation
from .outcome import evaluate
from .presentation import announce, render_board

logger = logging.getLogger(__name__)

_CELL_PATTERN = re.compile(r"^\s*(-?\d+)\s*[, ]\s*(-?\d+)\s*$")


def parse_cell(text: str) -> PlaceMark:
    """Parse `"row col"` or `"row,col"` into a move."""
    match = _CELL_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Expected 'row col', got {text!r}.")
    return PlaceMark(row=int(match.group(1)), col=int(match.group(2)))


def parse_script(text: str) -> list[PlaceMark]:
    """Parse a move list such as `"0,0 1,0 0,1"` or `"0 0; 1 0; 0 1"`."""
    chunks = text.split(";") if ";" in text else text.split()
    return [parse_cell(chunk) for chunk in chunks if chunk.strip()]


def render_observation(observation: TicTacChessObservation) -> str:
    cells = tuple(
        tuple(Player(value) if value is not None else None for value in row)
        for row in observation.cells
    )
    snapshot = BoardSnapshot(
        cells=cells,
        current_player=Player(observation.current_player),
        move_count=observation.move_count,
    )
    return render_board(snapshot)


def _report(run: MatchRun, output: str | None) -> None:
    state = run.final_state
    if isinstance(state, BoardSnapshot):
        print(render_board(state))
        message = announce(evaluate(state))
        if message:
            print(message)
    summary = json_dumps(run.result.to_dict(), indent=2)
    print(summary)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(summary, encoding="utf-8")


def run_play(runner: MatchRunner) -> MatchRun:
    seats = {
        player.value: HumanCLIController(
            f"human-{player.value.lower()}",
            parse_input=parse_cell,
            render=render_observation,
            prompt=f"{player.value} to move (row col): ",
        )
        for player in Player
    }
    return runner.run_match(TicTacChessGame(), seats)


def run_replay(runner: MatchRunner, moves: Sequence[PlaceMark]) -> MatchRun:
    # One shared script for both seats: moves are consumed in the order given,
    # whichever seat is to move.
    script = ScriptedAgent("script", moves=moves)
    run = runner.run_match(TicTacChessGame(), {player.value: script for player in Player})
    if script.remaining:
        logger.warning("Game ended with %d scripted moves left unplayed", script.remaining)
    return run


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tictacchess", description="Four-in-a-line on a 4x4 board.")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--log-dir", type=str, default=None, help="Write a JSONL event log per match here.")
    parser.add_argument("--reject-policy", default=REJECT_IGNORE, choices=sorted(REJECTED_MOVE_POLICIES))
    parser.add_argument("--max-turns", type=int, default=64)
    parser.add_argument("--output", type=str, default=None, help="Also write the result JSON to this path.")
    subcommands = parser.add_subparsers(dest="command", required=True)
    subcommands.add_parser("play", help="Two players share this terminal.")
    replay = subcommands.add_parser("replay", help="Play a list of moves, e.g. '0,0 1,0 0,1'.")
    replay.add_argument("moves", type=str)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    runner = MatchRunner(
        RunnerConfig(
            max_turns=args.max_turns,
            rejected_move_policy=args.reject_policy,
            event_log_dir=args.log_dir,
        )
    )

    if args.command == "replay":
        try:
            moves = parse_script(args.moves)
        except ValueError as exc:
            parser.error(str(exc))
        logger.debug("Replaying %d moves", len(moves))
        run = run_replay(runner, moves)
    else:
        run = run_play(runner)

    _report(run, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
