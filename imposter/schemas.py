"""Pydantic request/response bodies for the lobby HTTP API.

Websocket payloads are plain dicts built by ``imposter.room.Room``; only the
REST surface goes through these models.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, StrictInt

# -----------------------------
# REST request / response models
# -----------------------------


class CreateLobbyResponse(BaseModel):
    code: str


class LobbyDetails(BaseModel):
    code: str
    players: List[str]
    expires_in: int  # seconds
    expires_at: datetime


class StartGameRequest(BaseModel):
    imposters: StrictInt


class RestartGameRequest(BaseModel):
    # Missing or <= 0 keeps the lobby's previous imposter count
    imposters: Optional[StrictInt] = None


class StatusResponse(BaseModel):
    status: str


__all__ = [
    "CreateLobbyResponse",
    "LobbyDetails",
    "StartGameRequest",
    "RestartGameRequest",
    "StatusResponse",
]
