from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from fastapi import WebSocket

from .constants import (
    ENDED,
    HOST_NAME,
    LOBBY_TTL,
    STARTED,
    WAITING,
    WORD_ROLE,
)
from .errors import NotFound
from .logging_config import get_logger
from .schemas import LobbyDetails

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Best-effort transport helpers
# ---------------------------------------------------------------------------


async def deliver(ws: WebSocket, payload: dict) -> bool:
    """Send *payload* to *ws* and report whether it went out.

    A ``False`` result is expected and discarded by broadcasters: a dead peer
    is reaped by its own connection handler, never by the sender.
    """
    try:
        await ws.send_json(payload)
    except Exception as exc:
        logger.debug("Dropped %s message: %r", payload.get("type", "error"), exc)
        return False
    return True


async def close_quietly(ws: WebSocket, code: int = 1000) -> None:
    """Close *ws*, ignoring a peer that is already gone."""
    try:
        await ws.close(code=code)
    except Exception as exc:
        logger.debug("WebSocket close ignored: %r", exc)


class Room:
    """Runtime state and live websocket connections for a single lobby.

    Every field below is guarded by ``self.lock``. Public coroutines take the
    lock themselves; the ``notify_*`` helpers expect the caller to hold it.
    """

    def __init__(self, code: str, created_at: datetime, ttl: timedelta = LOBBY_TTL):
        self.code = code
        self.created_at = created_at
        self.ttl = ttl
        # Display names in join order; duplicates are separate joins
        self.players: List[str] = []
        # websocket -> player name, only for connections past the join handshake
        self.connections: Dict[WebSocket, str] = {}
        self.host_connection: Optional[WebSocket] = None
        self.phase = WAITING
        self.imposters = 0
        self.secret_word = ""
        self.roles: Dict[str, str] = {}
        # Set by the expiry sweep; a closed room accepts no further joins
        self.closed = False
        self.lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    @property
    def expires_at(self) -> datetime:
        return self.created_at + self.ttl

    def is_expired(self, now: datetime) -> bool:
        return now - self.created_at > self.ttl

    async def describe(self, now: datetime) -> LobbyDetails:
        async with self.lock:
            players = list(self.players)
        return LobbyDetails(
            code=self.code,
            players=players,
            expires_in=max(0, int((self.expires_at - now).total_seconds())),
            expires_at=self.expires_at,
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def lobby_state(self) -> dict:
        return {"type": "lobby_state", "code": self.code, "players": list(self.players)}

    def player_round_message(self, name: str) -> dict:
        """``game_started`` for one player: their own role, and the word unless imposter."""
        role = self.roles.get(name, WORD_ROLE)
        message: Dict[str, Any] = {"type": "game_started", "role": role, "code": self.code}
        if role == WORD_ROLE:
            message["word"] = self.secret_word
        return message

    def host_round_message(self) -> dict:
        return {"type": "game_started", "code": self.code, "count": len(self.players)}

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    async def join(self, ws: WebSocket, name: str) -> Optional[dict]:
        """Register *ws* under *name* and greet it.

        The host gets ``host_ready``, then the roster, then the round notice.
        A player gets the round notice, then everyone gets the roster. All of
        it is sent while holding the room lock.

        Returns the ``game_started`` notice sent to this connection when a
        round is already running, otherwise ``None``.
        """
        async with self.lock:
            if self.closed:
                raise NotFound("lobby not found")
            if name == HOST_NAME:
                self.host_connection = ws
                await deliver(ws, {"type": "host_ready", "code": self.code})
                await self._fanout(self._recipients(include_host=True), self.lobby_state())
                if self.phase != STARTED:
                    return None
                notice = self.host_round_message()
                await deliver(ws, notice)
                return notice

            self.connections[ws] = name
            self.players.append(name)
            notice = None
            if self.phase == STARTED:
                # Late joiner mid-round holds the word
                self.roles.setdefault(name, WORD_ROLE)
                notice = self.player_round_message(name)
                await deliver(ws, notice)
            await self._fanout(self._recipients(include_host=True), self.lobby_state())
            return notice

    async def leave(self, ws: WebSocket) -> Optional[str]:
        """Drop *ws* from the room.

        Returns the name it was registered under, or ``None`` when there was
        nothing to remove (already cleaned up, or torn down by the sweep).
        """
        async with self.lock:
            if ws is self.host_connection:
                self.host_connection = None
                return HOST_NAME
            name = self.connections.pop(ws, None)
            if name is None:
                return None
            if name in self.players:
                self.players.remove(name)
            return name

    async def close(self) -> int:
        """Tear the room down: forget every connection and close them all."""
        async with self.lock:
            self.closed = True
            targets = self._recipients(include_host=True)
            self.connections.clear()
            self.host_connection = None
            self.players.clear()
        for ws in targets:
            await close_quietly(ws)
        return len(targets)

    # ------------------------------------------------------------------
    # Round state (caller holds self.lock)
    # ------------------------------------------------------------------

    def begin_round(self, imposters: int, word: str, order: List[str], roles: Dict[str, str]) -> None:
        self.players = order
        self.imposters = imposters
        self.secret_word = word
        self.roles = roles
        self.phase = STARTED

    async def notify_round_started(self) -> int:
        """Send each player their own role and the host the player count."""
        sent = 0
        for ws, name in list(self.connections.items()):
            sent += await deliver(ws, self.player_round_message(name))
        if self.host_connection is not None:
            sent += await deliver(self.host_connection, self.host_round_message())
        return sent

    async def end(self) -> int:
        async with self.lock:
            self.phase = ENDED
            return await self._fanout(
                self._recipients(include_host=True),
                {"type": "game_ended", "code": self.code},
            )

    # ------------------------------------------------------------------
    # Broadcasting helpers
    # ------------------------------------------------------------------

    def _recipients(self, include_host: bool) -> List[WebSocket]:
        targets = list(self.connections)
        if include_host and self.host_connection is not None:
            targets.append(self.host_connection)
        return targets

    async def _fanout(self, targets: Iterable[WebSocket], payload: dict) -> int:
        sent = 0
        for ws in targets:
            sent += await deliver(ws, payload)
        return sent

    async def broadcast_lobby_state(self) -> int:
        """Push the current roster to every player and the host."""
        async with self.lock:
            return await self._fanout(self._recipients(include_host=True), self.lobby_state())

    async def broadcast_to_players(self, payload: dict) -> int:
        """Send *payload* to player connections only."""
        async with self.lock:
            return await self._fanout(self._recipients(include_host=False), payload)


__all__ = ["Room", "deliver", "close_quietly"]
