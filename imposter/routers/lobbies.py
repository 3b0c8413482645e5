from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends

from ..dependencies import get_registry
from ..game_logic import end_game, restart_game, start_game
from ..registry import LobbyRegistry
from ..schemas import (
    CreateLobbyResponse,
    LobbyDetails,
    RestartGameRequest,
    StartGameRequest,
    StatusResponse,
)

router = APIRouter(prefix="/lobbies", tags=["lobbies"])

# NotFound / InvalidArgument raised below are turned into 404 / 400 by the
# exception handlers registered in ``imposter.app``.


@router.post("", response_model=CreateLobbyResponse)
async def create_lobby(registry: LobbyRegistry = Depends(get_registry)):
    room = await registry.create_room()
    return CreateLobbyResponse(code=room.code)


@router.get("/{code}", response_model=LobbyDetails)
async def get_lobby(code: str, registry: LobbyRegistry = Depends(get_registry)):
    room = await registry.get_room(code)
    return await room.describe(registry.clock())


@router.post("/{code}/start", response_model=StatusResponse)
async def start_lobby_game(
    code: str,
    req: StartGameRequest,
    registry: LobbyRegistry = Depends(get_registry),
):
    await start_game(registry, code, req.imposters)
    return StatusResponse(status="game started")


@router.post("/{code}/end", response_model=StatusResponse)
async def end_lobby_game(code: str, registry: LobbyRegistry = Depends(get_registry)):
    await end_game(registry, code)
    return StatusResponse(status="game ended")


@router.post("/{code}/restart", response_model=StatusResponse)
async def restart_lobby_game(
    code: str,
    req: Optional[RestartGameRequest] = Body(default=None),
    registry: LobbyRegistry = Depends(get_registry),
):
    await restart_game(registry, code, req.imposters if req else None)
    return StatusResponse(status="game restarted")
