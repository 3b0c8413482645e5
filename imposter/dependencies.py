from fastapi import Request

from .registry import LobbyRegistry

# -----------------------------
# FastAPI dependency helpers
# -----------------------------


def get_registry(request: Request) -> LobbyRegistry:
    """Return the registry the application lifespan put on ``app.state``."""
    return request.app.state.registry


__all__ = ["get_registry"]
