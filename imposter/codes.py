"""Short, human-typeable lobby codes."""
from __future__ import annotations

import secrets

from .constants import CODE_ALPHABET, CODE_LENGTH


def generate_code(length: int = CODE_LENGTH) -> str:
    """Return *length* independent ``secrets`` draws from the lowercase alphabet."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


__all__ = ["generate_code"]
