"""Match runner: asks seats for moves until the game reaches a terminal state."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Any, Mapping, Sequence
from uuid import uuid4

from .errors import AgentExecutionError, IllegalMoveError, MatchConfigurationError
from .events import EventType, MatchEvent, write_jsonl
from .game import Game, PlayerId
from .result import MatchResult, TerminationReason
from .serialize import digest, to_serializable

logger = logging.getLogger(__name__)

REJECT_IGNORE = "ignore"
REJECT_FORFEIT = "forfeit"
REJECTED_MOVE_POLICIES = {REJECT_IGNORE, REJECT_FORFEIT}


@dataclass(frozen=True)
class RunnerConfig:
    """Runtime configuration for match execution.

    `max_turns` counts every request made to a seat, rejected ones included.
    Under the `ignore` policy a refused move is dropped and the same seat is
    asked again, up to `max_rejected_moves` times in a row.
    """

    max_turns: int = 64
    rejected_move_policy: str = REJECT_IGNORE
    max_rejected_moves: int = 8
    event_log_dir: str | Path | None = None

    def __post_init__(self) -> None:
        if self.rejected_move_policy not in REJECTED_MOVE_POLICIES:
            raise MatchConfigurationError(
                f"rejected_move_policy must be one of {sorted(REJECTED_MOVE_POLICIES)}; "
                f"received {self.rejected_move_policy!r}."
            )
        if self.max_turns < 1:
            raise MatchConfigurationError("max_turns must be >= 1.")
        if self.max_rejected_moves < 0:
            raise MatchConfigurationError("max_rejected_moves must be >= 0.")


@dataclass(frozen=True)
class MatchRun:
    """Complete execution artifact for one match."""

    result: MatchResult
    events: list[MatchEvent]
    final_state: Any = None


class MatchRunner:
    """Runs one match to completion with validation and event logging."""

    def __init__(self, config: RunnerConfig | None = None):
        self.config = config or RunnerConfig()

    def run_match(
        self,
        game: Game[Any, Any, Any],
        agents: Mapping[PlayerId, Any] | Sequence[Any],
        *,
        game_id: str | None = None,
        log_path: str | Path | None = None,
    ) -> MatchRun:
        """Run a full match and return the result plus its event history."""
        resolved_game_id = game_id or f"{game.game_name}-{uuid4().hex[:8]}"
        state = game.new_game()

        player_ids = list(game.player_ids(state))
        seats = self._normalize_agents(player_ids=player_ids, agents=agents)

        history: list[MatchEvent] = [
            MatchEvent.create(
                event_type=EventType.MATCH_START,
                game_id=resolved_game_id,
                turn=0,
                payload={
                    "players": player_ids,
                    "agents": {player_id: seats[player_id].agent_id for player_id in player_ids},
                    "initial_state_digest": self._state_digest(state),
                },
            )
        ]
        logger.info("Starting %s with seats %s", resolved_game_id, player_ids)

        for player_id in player_ids:
            seats[player_id].reset(resolved_game_id, player_id)

        rejected_counts: dict[str, int] = defaultdict(int)
        requests = 0
        turn = 0

        while not game.is_terminal(state):
            if requests >= self.config.max_turns:
                result = self._forced_result(
                    game=game,
                    game_id=resolved_game_id,
                    state=state,
                    winner=None,
                    reason=TerminationReason.MAX_TURNS,
                    details=f"Reached max_turns={self.config.max_turns}.",
                    turn=turn,
                    rejected_counts=rejected_counts,
                )
                return self._finish(seats, result, history, state, log_path, resolved_game_id)

            player_id = game.current_player(state)
            agent = seats[player_id]
            observation = game.observation(state, player_id)
            legal_moves = game.legal_moves(state, player_id)
            consecutive_rejections = 0

            while True:
                requests += 1
                started = perf_counter()
                try:
                    move = agent.act(observation, legal_moves)
                except AgentExecutionError as exc:
                    # The seat has no move to give (script ran out, input closed), so nobody wins.
                    logger.warning("Agent %s stopped for %s: %s", agent.agent_id, player_id, exc)
                    history.append(
                        MatchEvent.create(
                            event_type=EventType.AGENT_ERROR,
                            game_id=resolved_game_id,
                            turn=turn,
                            payload={"player_id": player_id, "error": exc.to_dict()},
                        )
                    )
                    result = self._forced_result(
                        game=game,
                        game_id=resolved_game_id,
                        state=state,
                        winner=None,
                        reason=TerminationReason.ABANDONED,
                        details=str(exc),
                        turn=turn,
                        rejected_counts=rejected_counts,
                    )
                    return self._finish(seats, result, history, state, log_path, resolved_game_id)
                except Exception as exc:
                    logger.exception("Agent %s failed to move for %s", agent.agent_id, player_id)
                    error = AgentExecutionError(player_id, f"Agent act() failed: {exc}")
                    history.append(
                        MatchEvent.create(
                            event_type=EventType.AGENT_ERROR,
                            game_id=resolved_game_id,
                            turn=turn,
                            payload={"player_id": player_id, "error": error.to_dict()},
                        )
                    )
                    result = self._forced_result(
                        game=game,
                        game_id=resolved_game_id,
                        state=state,
                        winner=game.forfeit_winner(state, player_id),
                        reason=TerminationReason.AGENT_EXCEPTION,
                        details=str(error),
                        turn=turn,
                        rejected_counts=rejected_counts,
                    )
                    return self._finish(seats, result, history, state, log_path, resolved_game_id)
                duration_ms = (perf_counter() - started) * 1000.0

                accepted, reason = game.check_move(state, player_id, move)
                if accepted:
                    break

                rejected_counts[player_id] += 1
                consecutive_rejections += 1
                error = IllegalMoveError(player_id, move, reason)
                logger.debug("Rejected %s from %s: %s", self._move_payload(move), player_id, reason)
                history.append(
                    MatchEvent.create(
                        event_type=EventType.REJECTED_MOVE,
                        game_id=resolved_game_id,
                        turn=turn,
                        payload={
                            "player_id": player_id,
                            "move": self._move_payload(move),
                            "reason": reason,
                            "attempt": consecutive_rejections,
                        },
                    )
                )
                agent.on_rejected_move(error, observation)

                out_of_attempts = consecutive_rejections > self.config.max_rejected_moves
                if self.config.rejected_move_policy == REJECT_FORFEIT or out_of_attempts:
                    result = self._forced_result(
                        game=game,
                        game_id=resolved_game_id,
                        state=state,
                        winner=game.forfeit_winner(state, player_id),
                        reason=TerminationReason.REJECTED_MOVE_FORFEIT,
                        details=str(error),
                        turn=turn,
                        rejected_counts=rejected_counts,
                    )
                    return self._finish(seats, result, history, state, log_path, resolved_game_id)
                if requests >= self.config.max_turns:
                    break

            if not accepted:
                continue

            state = game.apply_move(state, player_id, move)
            turn += 1
            payload: dict[str, Any] = {
                "player_id": player_id,
                "observation_digest": observation.observation_digest(),
                "move": self._move_payload(move),
                "state_digest": self._state_digest(state),
                "duration_ms": duration_ms,
            }
            if hasattr(game, "describe_move"):
                payload["summary"] = game.describe_move(player_id, move, state)
            history.append(
                MatchEvent.create(
                    event_type=EventType.TURN,
                    game_id=resolved_game_id,
                    turn=turn,
                    payload=payload,
                )
            )
            logger.debug("Turn %d: %s played %s", turn, player_id, payload["move"])

        game_result = game.outcome(state)
        result = MatchResult(
            game_id=resolved_game_id,
            game_name=game.game_name,
            winner=game_result.winner,
            termination_reason=game_result.termination_reason,
            turns=turn,
            winning_line=game_result.winning_line,
            stats=self._merge_stats(game_result.stats, rejected_counts),
            details=game_result.details,
            final_state_digest=self._state_digest(state),
        )
        return self._finish(seats, result, history, state, log_path, resolved_game_id)

    def _finish(
        self,
        seats: Mapping[PlayerId, Any],
        result: MatchResult,
        history: list[MatchEvent],
        state: Any,
        log_path: str | Path | None,
        game_id: str,
    ) -> MatchRun:
        resolved_log_path = self._resolve_log_path(log_path=log_path, game_id=game_id)
        # The terminal row counts itself.
        final_result = MatchResult(
            game_id=result.game_id,
            game_name=result.game_name,
            winner=result.winner,
            termination_reason=result.termination_reason,
            turns=result.turns,
            winning_line=result.winning_line,
            stats=result.stats,
            details=result.details,
            final_state_digest=result.final_state_digest,
            event_count=len(history) + 1,
            log_path=str(resolved_log_path) if resolved_log_path is not None else None,
        )
        history.append(
            MatchEvent.create(
                event_type=EventType.TERMINAL,
                game_id=game_id,
                turn=final_result.turns,
                payload={"result": final_result.to_dict()},
            )
        )
        logger.info(
            "Finished %s: winner=%s reason=%s",
            game_id,
            final_result.winner,
            final_result.termination_reason.value,
        )
        if resolved_log_path is not None:
            write_jsonl(resolved_log_path, history)

        for agent in seats.values():
            agent.on_game_end(final_result, history)
        return MatchRun(result=final_result, events=history, final_state=state)

    def _resolve_log_path(self, *, log_path: str | Path | None, game_id: str) -> Path | None:
        if log_path is not None:
            return Path(log_path)
        if self.config.event_log_dir is None:
            return None
        return Path(self.config.event_log_dir) / f"{game_id}.jsonl"

    def _forced_result(
        self,
        *,
        game: Game[Any, Any, Any],
        game_id: str,
        state: Any,
        winner: str | None,
        reason: TerminationReason,
        details: str | None,
        turn: int,
        rejected_counts: Mapping[str, int],
    ) -> MatchResult:
        return MatchResult(
            game_id=game_id,
            game_name=game.game_name,
            winner=winner,
            termination_reason=reason,
            turns=turn,
            stats=self._merge_stats({}, rejected_counts),
            details=details,
            final_state_digest=self._state_digest(state),
        )

    def _merge_stats(self, base_stats: Mapping[str, Any] | None, rejected_counts: Mapping[str, int]) -> dict[str, Any]:
        merged = dict(base_stats or {})
        merged["rejected_moves"] = {player_id: int(count) for player_id, count in rejected_counts.items()}
        return merged

    def _normalize_agents(
        self,
        *,
        player_ids: Sequence[PlayerId],
        agents: Mapping[PlayerId, Any] | Sequence[Any],
    ) -> dict[PlayerId, Any]:
        if isinstance(agents, Mapping):
            seats = dict(agents)
        else:
            agent_list = list(agents)
            if len(agent_list) != len(player_ids):
                raise MatchConfigurationError(
                    f"Expected {len(player_ids)} agents for sequence input, received {len(agent_list)}."
                )
            seats = dict(zip(player_ids, agent_list, strict=True))
        missing = [player_id for player_id in player_ids if player_id not in seats]
        if missing:
            raise MatchConfigurationError(f"Missing agents for player IDs: {missing}")
        return seats

    def _move_payload(self, move: Any) -> Any:
        return move.to_dict() if hasattr(move, "to_dict") else to_serializable(move)

    def _state_digest(self, state: Any) -> str:
        if hasattr(state, "state_digest") and callable(state.state_digest):
            return str(state.state_digest())
        return digest(to_serializable(state))
