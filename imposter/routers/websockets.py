from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..constants import HOST_NAME
from ..errors import NotFound, ProtocolViolation
from ..logging_config import get_event_logger, get_logger
from ..registry import LobbyRegistry
from ..room import Room, close_quietly, deliver

router = APIRouter(prefix="", tags=["ws"])

logger = get_logger(__name__)
events = get_event_logger()


async def _reject(ws: WebSocket, detail: str) -> None:
    """Refuse the upgrade with a 404, or a 4004 close if the server can't send one."""
    if "websocket.http.response" in (ws.scope.get("extensions") or {}):
        await ws.send_denial_response(JSONResponse({"detail": detail}, status_code=404))
    else:
        await ws.close(code=4004, reason=detail)


async def _read_join(ws: WebSocket, name: Optional[str]) -> str:
    """Resolve the display name from ``?name=`` or the first ``join`` message."""
    if name:
        return name
    try:
        msg = await ws.receive_json()
    except (ValueError, KeyError):
        raise ProtocolViolation("first message must be join")
    if not isinstance(msg, dict) or msg.get("type") != "join":
        raise ProtocolViolation("first message must be join")
    name = msg.get("name")
    if not isinstance(name, str) or not name:
        raise ProtocolViolation("name required")
    return name


async def _control_loop(room: Room, ws: WebSocket) -> None:
    while True:
        try:
            msg = await ws.receive_json()
        except (ValueError, KeyError):
            logger.info("Unreadable frame in lobby %s, dropping connection", room.code)
            return
        if isinstance(msg, dict) and msg.get("type") == "start":
            await room.broadcast_to_players({"type": "start_game"})


@router.websocket("/ws/{code}")
async def lobby_ws_endpoint(ws: WebSocket, code: str, name: Optional[str] = Query(default=None)):
    registry: LobbyRegistry = ws.app.state.registry
    try:
        room = await registry.get_room(code)
    except NotFound as exc:
        logger.info("WebSocket rejected: lobby %s not found", code)
        await _reject(ws, exc.detail)
        return

    await ws.accept()

    try:
        name = await _read_join(ws, name)
        await room.join(ws, name)
    except WebSocketDisconnect:
        logger.info("WebSocket closed before joining lobby %s", code)
        return
    except (ProtocolViolation, NotFound) as exc:
        logger.info("Join refused in lobby %s: %s", code, exc.detail)
        await deliver(ws, {"error": exc.detail})
        await close_quietly(ws)
        return

    try:
        if name == HOST_NAME:
            events.info("Host connected to lobby %s", code)
        else:
            events.info("Player joined lobby %s: %s (total players: %d)", code, name, len(room.players))

        await _control_loop(room, ws)
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected from lobby %s (%s)", code, name)
    except RuntimeError as exc:
        # receive() on a socket the expiry sweep already closed
        logger.info("WebSocket for %s in lobby %s no longer readable: %s", name, code, exc)
    finally:
        left = await room.leave(ws)
        if left is not None:
            if left == HOST_NAME:
                events.info("Host disconnected from lobby %s", code)
            else:
                events.info("Player left lobby %s: %s", code, left)
            await room.broadcast_lobby_state()
        await close_quietly(ws)
