"""The lobby registry: every live ``Room`` keyed by its code.

One ``LobbyRegistry`` is created by the application lifespan and handed to
the routers through ``app.state``. Its lock only guards the code -> room
mapping and is always released before a room lock is taken or any socket I/O
happens.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from .codes import generate_code
from .constants import LOBBY_TTL, SWEEP_INTERVAL_SECONDS
from .errors import NotFound
from .logging_config import get_event_logger, get_logger
from .room import Room

logger = get_logger(__name__)
events = get_event_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LobbyRegistry:
    def __init__(self, ttl: timedelta = LOBBY_TTL, clock: Callable[[], datetime] = utcnow):
        self.ttl = ttl
        self.clock = clock
        self._rooms: Dict[str, Room] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        return code in self._rooms

    async def create_room(self) -> Room:
        async with self._lock:
            code = generate_code()
            while code in self._rooms:
                code = generate_code()
            room = Room(code, created_at=self.clock(), ttl=self.ttl)
            self._rooms[code] = room
        events.info("Lobby created: %s", code)
        return room

    async def get_room(self, code: str) -> Room:
        async with self._lock:
            room = self._rooms.get(code)
        if room is None:
            raise NotFound("lobby not found")
        return room

    async def sweep_expired(self, now: Optional[datetime] = None) -> List[str]:
        """Remove every room older than the TTL and close its connections.

        Rooms leave the mapping first so no new lookup can find them; the
        sockets are closed afterwards, outside the registry lock.
        """
        now = now or self.clock()
        async with self._lock:
            expired = [room for room in self._rooms.values() if room.is_expired(now)]
            for room in expired:
                del self._rooms[room.code]

        for room in expired:
            closed = await room.close()
            events.info("Lobby expired and removed: %s (%d connections closed)", room.code, closed)
        return [room.code for room in expired]

    async def run_sweeper(self, interval: float = SWEEP_INTERVAL_SECONDS) -> None:
        """Run ``sweep_expired`` every *interval* seconds until cancelled."""
        logger.info("Lobby expiry sweep running every %ss", interval)
        while True:
            await asyncio.sleep(interval)
            try:
                await self.sweep_expired()
            except Exception:
                logger.error("Lobby expiry sweep failed", exc_info=True)

    async def close(self) -> None:
        """Shutdown: drop every room and close all of their connections."""
        async with self._lock:
            rooms = list(self._rooms.values())
            self._rooms.clear()
        for room in rooms:
            await room.close()
        if rooms:
            logger.info("Closed %d lobbies on shutdown", len(rooms))


__all__ = ["LobbyRegistry", "utcnow"]
