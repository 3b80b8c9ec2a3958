"""FastAPI server exposing the board to a local UI."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from framework.errors import IllegalMoveError
from framework.serialize import json_dumps
from server.schemas import CreateMatchRequest, SubmitMoveRequest
from server.session import MatchSession, SessionStore
from server.settings import ServerSettings
from tictacchess.board import MoveRejectedError

logger = logging.getLogger(__name__)

settings = ServerSettings.from_env()
app = FastAPI(title="Tic Tac Chess Local API", version="0.1.0")
store = SessionStore(event_log_dir=settings.event_log_dir)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session_or_404(match_id: str) -> MatchSession:
    try:
        return store.get(match_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown match_id: {match_id}") from exc


@app.get("/api/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok"}


@app.post("/api/match/new")
def new_match(request: CreateMatchRequest) -> dict:
    """Create a new in-memory match with an empty board."""
    try:
        session = store.create_match(reject_policy=request.reject_policy, auto_reset=request.auto_reset)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session.view()


@app.get("/api/match/{match_id}")
def get_match(match_id: str) -> dict:
    """Current board, player to move and outcome."""
    return _session_or_404(match_id).view()


@app.post("/api/match/{match_id}/move")
def submit_move(match_id: str, request: SubmitMoveRequest) -> dict:
    """Mark a cell for the player to move."""
    session = _session_or_404(match_id)
    try:
        return session.submit_move(row=request.row, col=request.col)
    except MoveRejectedError as exc:
        detail = exc.to_dict()
        detail["view"] = session.view()
        raise HTTPException(status_code=400, detail=detail) from exc
    except IllegalMoveError as exc:
        detail = exc.to_dict()
        detail["view"] = session.view()
        raise HTTPException(status_code=409, detail=detail) from exc


@app.post("/api/match/{match_id}/reset")
def reset_match(match_id: str) -> dict:
    """Clear the board, typically after a finished game has been shown to the players."""
    return _session_or_404(match_id).reset()


@app.delete("/api/match/{match_id}")
def delete_match(match_id: str) -> dict[str, Any]:
    """Drop a match and its event history from memory."""
    try:
        session = store.remove(match_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown match_id: {match_id}") from exc
    return {"match_id": match_id, "deleted": True, "games_played": session.game_number}


@app.get("/api/match/{match_id}/events", response_model=None)
def get_events(match_id: str, format: str = Query(default="array")) -> Any:
    """Return full event history as array (default) or JSONL text."""
    try:
        events = store.all_events(match_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown match_id: {match_id}") from exc

    if format == "jsonl":
        text = "\n".join(json_dumps(event) for event in events)
        return PlainTextResponse(content=text, media_type="application/jsonl")
    return events


def run() -> None:
    import uvicorn

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("server.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
