"""Round mechanics: role assignment and the start / end / restart flows.

Nothing here knows about HTTP. The functions take the registry and a lobby
code, mutate the ``imposter.room.Room`` under its own lock and push the
resulting notifications to its websockets. Routers map the raised
``NotFound`` / ``InvalidArgument`` onto status codes.
"""
from __future__ import annotations

import secrets
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import IMPOSTER_ROLE, WORD_ROLE
from .errors import InvalidArgument
from .logging_config import get_event_logger
from .registry import LobbyRegistry
from .room import Room
from .words import GAME_WORDS

events = get_event_logger()

_rng = secrets.SystemRandom()

# ---------------------------------------------------------------------------
# Role assignment
# ---------------------------------------------------------------------------


def draw_word(words: Sequence[str] = GAME_WORDS) -> str:
    return secrets.choice(words)


def assign_roles(players: Sequence[str], imposters: int) -> Tuple[List[str], Dict[str, str]]:
    """Shuffle *players* and hand the first *imposters* of them the imposter role.

    Returns the shuffled order and the name -> role mapping. A name joined
    twice takes the role of its last position, so the final name in the order
    always keeps the word.
    """
    order = list(players)
    _rng.shuffle(order)
    roles: Dict[str, str] = {}
    for idx, name in enumerate(order):
        roles[name] = IMPOSTER_ROLE if idx < imposters else WORD_ROLE
    return order, roles


def check_imposters(imposters: int, player_count: int) -> None:
    """At least one imposter and at least one word holder."""
    if imposters < 1 or imposters >= player_count:
        raise InvalidArgument(f"imposters must be 1 to {player_count - 1}")


async def _deal(room: Room, imposters: int) -> str:
    """Validate, deal a fresh round and notify everyone. Caller holds ``room.lock``."""
    check_imposters(imposters, len(room.players))
    word = draw_word()
    order, roles = assign_roles(room.players, imposters)
    room.begin_round(imposters, word, order, roles)
    await room.notify_round_started()
    return word


# ---------------------------------------------------------------------------
# Game flow
# ---------------------------------------------------------------------------


async def start_game(registry: LobbyRegistry, code: str, imposters: int) -> Room:
    room = await registry.get_room(code)
    async with room.lock:
        word = await _deal(room, imposters)
    events.info("Game started in lobby %s with word '%s' and %d imposters", code, word, imposters)
    return room


async def end_game(registry: LobbyRegistry, code: str) -> Room:
    """Mark the round over and tell everyone. Ending twice just re-broadcasts."""
    room = await registry.get_room(code)
    await room.end()
    events.info("Game ended in lobby %s", code)
    return room


async def restart_game(registry: LobbyRegistry, code: str, imposters: Optional[int] = None) -> Room:
    """Deal a new round; a missing or non-positive count reuses the previous one."""
    room = await registry.get_room(code)
    async with room.lock:
        if imposters is None or imposters <= 0:
            imposters = room.imposters
        word = await _deal(room, imposters)
    events.info("Game restarted in lobby %s with word '%s' and %d imposters", code, word, imposters)
    return room


__all__ = [
    "draw_word",
    "assign_roles",
    "check_imposters",
    "start_game",
    "end_game",
    "restart_game",
]
