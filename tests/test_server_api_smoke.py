"""Smoke tests for the local FastAPI match API."""

from __future__ import annotations

import threading

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

import server.main as main_module
from server.main import delete_match, get_events, get_match, health, new_match, reset_match, submit_move
from server.schemas import CreateMatchRequest, SubmitMoveRequest
from server.session import MatchSession, SessionStore
from server.settings import ServerSettings, load_dotenv
import server.settings as settings_module

ROW_WIN = [(0, 0), (1, 0), (0, 1), (1, 1), (0, 2), (1, 2), (0, 3)]


@pytest.fixture(autouse=True)
def _fresh_store(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(main_module, "store", SessionStore(event_log_dir=tmp_path))


def _new_match(payload: dict | None = None) -> dict:
    return new_match(CreateMatchRequest.model_validate(payload or {}))


def _submit(match_id: str, row: int, col: int) -> dict:
    return submit_move(match_id, SubmitMoveRequest.model_validate({"row": row, "col": col}))


def _expect_http_error(fn, expected_status: int):
    try:
        fn()
    except HTTPException as exc:
        assert exc.status_code == expected_status
        return exc.detail
    raise AssertionError("Expected HTTPException to be raised.")


def test_health() -> None:
    assert health() == {"status": "ok"}


def test_new_match_starts_empty_with_x_to_move() -> None:
    created = _new_match()

    assert created["current_player"] == "X"
    assert created["move_count"] == 0
    assert created["outcome"]["status"] == "in_progress"
    assert created["announcement"] is None
    assert len(created["legal_cells"]) == 16
    assert created["players"]["X"] == {"glyph": "X", "color": "red"}
    assert created["reject_policy"] == "silent"
    assert get_match(created["match_id"]) == created


def test_row_win_then_reset() -> None:
    match_id = _new_match()["match_id"]
    for row, col in ROW_WIN[:-1]:
        view = _submit(match_id, row, col)
        assert view["outcome"]["status"] == "in_progress"

    finished = _submit(match_id, *ROW_WIN[-1])
    assert finished["terminal"] is True
    assert finished["outcome"] == {"status": "won", "winner": "X", "line": "row-0", "forced": False}
    assert finished["announcement"] == "Player X wins!"
    assert finished["legal_cells"] == []
    assert finished["last_result"]["termination_reason"] == "line_completed"

    detail = _expect_http_error(lambda: _submit(match_id, 3, 3), 409)
    assert detail["reason"] == "game_over"

    fresh = reset_match(match_id)
    assert fresh["move_count"] == 0
    assert fresh["current_player"] == "X"
    assert fresh["game_number"] == 2
    assert fresh["outcome"]["status"] == "in_progress"


def test_silent_policy_returns_unchanged_board_with_rejection_code() -> None:
    match_id = _new_match()["match_id"]
    before = _submit(match_id, 1, 1)

    occupied = _submit(match_id, 1, 1)
    off_board = _submit(match_id, 4, 0)

    assert occupied["rejected"] == "cell_occupied"
    assert off_board["rejected"] == "out_of_bounds"
    for view in (occupied, off_board):
        assert view["cells"] == before["cells"]
        assert view["current_player"] == "O"
        assert view["move_count"] == 1


def test_report_policy_raises_400_with_error_payload() -> None:
    match_id = _new_match({"reject_policy": "report"})["match_id"]
    _submit(match_id, 2, 2)

    detail = _expect_http_error(lambda: _submit(match_id, 2, 2), 400)

    assert detail["error"] == "cell_occupied"
    assert detail["row"] == 2 and detail["col"] == 2
    assert detail["view"]["current_player"] == "O"


def test_auto_reset_reports_finished_game_and_clears_board() -> None:
    match_id = _new_match({"auto_reset": True})["match_id"]
    for row, col in ROW_WIN[:-1]:
        _submit(match_id, row, col)

    view = _submit(match_id, *ROW_WIN[-1])

    assert view["move_count"] == 0
    assert view["current_player"] == "X"
    assert view["game_number"] == 2
    assert view["last_result"]["announcement"] == "Player X wins!"
    assert view["last_result"]["cells"][0] == ["X", "X", "X", "X"]


def test_forced_draw_is_reported_before_board_is_full() -> None:
    match_id = _new_match()["match_id"]
    sequence = [(0, 0), (0, 2), (1, 2), (0, 3), (1, 3), (1, 1), (2, 0), (3, 0), (2, 1), (3, 1), (3, 3), (2, 2)]
    for row, col in sequence:
        view = _submit(match_id, row, col)

    assert view["outcome"] == {"status": "draw", "winner": None, "line": None, "forced": True}
    assert view["announcement"] == "The game ended in a draw."
    assert view["last_result"]["termination_reason"] == "forced_draw"


def test_events_array_and_jsonl(tmp_path) -> None:
    match_id = _new_match()["match_id"]
    _submit(match_id, 0, 0)
    _submit(match_id, 0, 0)
    reset_match(match_id)

    events = get_events(match_id=match_id, format="array")
    assert [event["event_type"] for event in events] == ["match_start", "turn", "rejected_move", "reset"]

    jsonl = get_events(match_id=match_id, format="jsonl")
    assert jsonl.media_type == "application/jsonl"
    assert len(jsonl.body.decode("utf-8").splitlines()) == 4


def test_terminal_game_writes_event_log(tmp_path) -> None:
    match_id = _new_match()["match_id"]
    for row, col in ROW_WIN:
        _submit(match_id, row, col)

    log_path = tmp_path / f"{match_id}.jsonl"
    assert log_path.exists()
    assert '"event_type":"terminal"' in log_path.read_text(encoding="utf-8")


def test_unknown_match_returns_404() -> None:
    _expect_http_error(lambda: get_match("match-missing"), 404)
    _expect_http_error(lambda: _submit("match-missing", 0, 0), 404)
    _expect_http_error(lambda: reset_match("match-missing"), 404)
    _expect_http_error(lambda: get_events(match_id="match-missing", format="array"), 404)


def test_delete_match_frees_the_session() -> None:
    match_id = _new_match()["match_id"]
    _submit(match_id, 0, 0)

    deleted = delete_match(match_id)

    assert deleted == {"match_id": match_id, "deleted": True, "games_played": 1}
    _expect_http_error(lambda: get_match(match_id), 404)
    _expect_http_error(lambda: delete_match(match_id), 404)


def test_request_schemas_validate_input() -> None:
    with pytest.raises(ValidationError):
        SubmitMoveRequest.model_validate({"row": "1", "col": 0})
    with pytest.raises(ValidationError):
        CreateMatchRequest.model_validate({"reject_policy": "loud"})


def test_concurrent_taps_on_one_cell_mark_it_once() -> None:
    session = MatchSession.create()
    barrier = threading.Barrier(8)
    results: list[dict] = []

    def _tap() -> None:
        barrier.wait()
        results.append(session.submit_move(0, 0))

    threads = [threading.Thread(target=_tap) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert session.board.move_count == 1
    assert sum(1 for result in results if "rejected" not in result) == 1
    assert sum(1 for result in results if result.get("rejected") == "cell_occupied") == 7


def test_session_rejects_unknown_policy() -> None:
    with pytest.raises(ValueError):
        MatchSession.create(reject_policy="loud")


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("TICTACCHESS_PORT", "9001")
    monkeypatch.setenv("TICTACCHESS_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("TICTACCHESS_LOG_LEVEL", "debug")

    loaded = ServerSettings.from_env()

    assert loaded.port == 9001
    assert loaded.cors_origins == ("http://a.test", "http://b.test")
    assert loaded.log_level == "DEBUG"

    monkeypatch.setenv("TICTACCHESS_PORT", "eighty")
    with pytest.raises(ValueError):
        ServerSettings.from_env()


def test_load_dotenv_does_not_override_existing(monkeypatch, tmp_path) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text('# local\nexport TICTACCHESS_HOST="0.0.0.0"\nTICTACCHESS_EVENT_LOG_DIR=logs\n', encoding="utf-8")
    monkeypatch.setattr(settings_module, "_DOTENV_LOADED", False)
    monkeypatch.setenv("TICTACCHESS_HOST", "placeholder")
    monkeypatch.delenv("TICTACCHESS_HOST")
    monkeypatch.setenv("TICTACCHESS_EVENT_LOG_DIR", "already-set")

    load_dotenv(dotenv)

    loaded = ServerSettings.from_env()
    assert loaded.host == "0.0.0.0"
    assert str(loaded.event_log_dir) == "already-set"
