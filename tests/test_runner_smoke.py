"""Smoke tests for the match runner driving Tic Tac Chess with scripted moves."""

from __future__ import annotations

import logging

import pytest

from framework.agents.scripted_agent import ScriptedAgent
from framework.errors import MatchConfigurationError
from framework.events import EventType, read_jsonl
from framework.result import MatchResult, TerminationReason
from framework.runner import MatchRunner, RunnerConfig
from tictacchess.game import TicTacChessGame
from tictacchess.moves import PlaceMark

from tests.boards import FORCED_DRAW_SEQUENCE


def _script(*cells: tuple[int, int]) -> ScriptedAgent:
    return ScriptedAgent("script", moves=[PlaceMark(row=row, col=col) for row, col in cells])


def _both_seats(agent: ScriptedAgent) -> dict[str, ScriptedAgent]:
    return {"X": agent, "O": agent}


def _event_types(run) -> list[EventType]:
    return [event.event_type for event in run.events]


def test_scripted_row_win() -> None:
    runner = MatchRunner()
    run = runner.run_match(
        TicTacChessGame(),
        _both_seats(_script((0, 0), (1, 0), (0, 1), (1, 1), (0, 2), (1, 2), (0, 3))),
    )

    assert run.result.winner == "X"
    assert run.result.winning_line == "row-0"
    assert run.result.termination_reason is TerminationReason.LINE_COMPLETED
    assert run.result.turns == 7
    assert _event_types(run)[0] is EventType.MATCH_START
    assert _event_types(run)[-1] is EventType.TERMINAL
    assert _event_types(run).count(EventType.TURN) == 7
    assert run.result.event_count == len(run.events)


def test_forced_draw_ends_match_before_board_is_full() -> None:
    run = MatchRunner().run_match(TicTacChessGame(), _both_seats(_script(*FORCED_DRAW_SEQUENCE)))

    assert run.result.winner is None
    assert run.result.termination_reason is TerminationReason.FORCED_DRAW
    assert run.result.turns == 12
    assert run.final_state.marks() == 12


def test_rejected_moves_are_ignored_and_turn_is_kept() -> None:
    # O taps X's cell and then off the board before playing a real move.
    agent = _script((0, 0), (0, 0), (5, 5), (1, 0), (0, 1), (1, 1), (0, 2), (1, 2), (0, 3))
    run = MatchRunner().run_match(TicTacChessGame(), _both_seats(agent))

    assert run.result.winner == "X"
    assert run.result.turns == 7
    assert run.result.stats["rejected_moves"] == {"O": 2}

    rejected = [event for event in run.events if event.event_type is EventType.REJECTED_MOVE]
    assert [event.payload["reason"] for event in rejected] == ["cell_occupied", "out_of_bounds"]
    assert all(event.payload["player_id"] == "O" for event in rejected)
    assert [event.payload["attempt"] for event in rejected] == [1, 2]
    assert all(event.turn == 1 for event in rejected)


def test_forfeit_policy_awards_the_other_seat() -> None:
    runner = MatchRunner(RunnerConfig(rejected_move_policy="forfeit"))
    run = runner.run_match(TicTacChessGame(), _both_seats(_script((2, 2), (2, 2))))

    assert run.result.termination_reason is TerminationReason.REJECTED_MOVE_FORFEIT
    assert run.result.winner == "X"


def test_repeated_rejections_eventually_forfeit() -> None:
    runner = MatchRunner(RunnerConfig(max_rejected_moves=1))
    run = runner.run_match(TicTacChessGame(), _both_seats(_script((2, 2), (2, 2), (9, 9))))

    assert run.result.termination_reason is TerminationReason.REJECTED_MOVE_FORFEIT
    assert run.result.winner == "X"
    assert run.result.stats["rejected_moves"] == {"O": 2}


def test_exhausted_script_abandons_match_without_winner(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="framework.runner"):
        run = MatchRunner().run_match(TicTacChessGame(), _both_seats(_script((0, 0), (1, 1))))

    assert run.result.termination_reason is TerminationReason.ABANDONED
    assert run.result.winner is None
    assert run.result.turns == 2
    assert run.final_state.marks() == 2
    assert EventType.AGENT_ERROR in _event_types(run)
    assert not [record for record in caplog.records if record.levelno >= logging.ERROR]


def test_unexpected_agent_exception_forfeits_to_other_seat() -> None:
    def _broken(_observation, _legal_moves):
        raise RuntimeError("policy crashed")

    seats = {"X": ScriptedAgent("broken", policy=_broken), "O": _script((1, 1))}
    run = MatchRunner().run_match(TicTacChessGame(), seats)

    assert run.result.termination_reason is TerminationReason.AGENT_EXCEPTION
    assert run.result.winner == "O"
    assert "policy crashed" in run.result.details


def test_max_turns_counts_rejected_requests() -> None:
    runner = MatchRunner(RunnerConfig(max_turns=3))
    run = runner.run_match(TicTacChessGame(), _both_seats(_script((0, 0), (0, 0), (0, 0), (0, 0))))

    assert run.result.termination_reason is TerminationReason.MAX_TURNS
    assert run.result.winner is None


def test_event_log_is_written_as_jsonl(tmp_path) -> None:
    runner = MatchRunner(RunnerConfig(event_log_dir=tmp_path))
    run = runner.run_match(
        TicTacChessGame(),
        _both_seats(_script((0, 0), (1, 0), (1, 1), (2, 0), (2, 2), (3, 0), (3, 3))),
        game_id="diag-game",
    )

    assert run.result.log_path == str(tmp_path / "diag-game.jsonl")
    replayed = read_jsonl(tmp_path / "diag-game.jsonl")
    assert [event.event_type for event in replayed] == _event_types(run)
    assert replayed[-1].payload["result"]["winning_line"] == "diag-main"
    assert MatchResult.from_dict(replayed[-1].payload["result"]) == run.result


def test_sequence_agents_are_mapped_to_seats_in_order() -> None:
    x_agent = _script((0, 0), (0, 1), (0, 2), (0, 3))
    o_agent = _script((3, 0), (3, 1), (3, 2))
    run = MatchRunner().run_match(TicTacChessGame(), [x_agent, o_agent])

    assert run.result.winner == "X"


def test_runner_configuration_errors() -> None:
    with pytest.raises(MatchConfigurationError):
        RunnerConfig(rejected_move_policy="retry-forever")
    with pytest.raises(MatchConfigurationError):
        MatchRunner().run_match(TicTacChessGame(), {"X": _script((0, 0))})
    with pytest.raises(MatchConfigurationError):
        MatchRunner().run_match(TicTacChessGame(), [_script((0, 0))])
