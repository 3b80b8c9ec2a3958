"""Pydantic request schemas for the match API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, StrictInt

RejectPolicy = Literal["silent", "report"]


class CreateMatchRequest(BaseModel):
    """Request body for creating a new match session."""

    reject_policy: RejectPolicy = "silent"
    auto_reset: bool = False


class SubmitMoveRequest(BaseModel):
    """Board coordinates already resolved by the client (tap, click, prompt)."""

    row: StrictInt
    col: StrictInt
