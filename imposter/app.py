from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .constants import API_PREFIX, EVENT_LOG_FILE, LOG_FILE, LOG_LEVEL, SWEEP_INTERVAL_SECONDS
from .errors import LobbyError
from .logging_config import get_logger, setup_logging
from .registry import LobbyRegistry
from .routers import lobbies as lobbies_router
from .routers import websockets as ws_router

setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE, event_log_file=EVENT_LOG_FILE)
logger = get_logger(__name__)

# -----------------------------
# Lifespan: registry + expiry sweep
# -----------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry = LobbyRegistry()
    app.state.registry = registry
    sweeper = asyncio.create_task(registry.run_sweeper(SWEEP_INTERVAL_SECONDS))
    try:
        yield
    finally:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        await registry.close()


# -----------------------------
# FastAPI app instance
# -----------------------------

app = FastAPI(title="Imposter Lobby", lifespan=lifespan)

# Allow all origins – the UI may be served from anywhere.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(lobbies_router.router, prefix=API_PREFIX)
app.include_router(ws_router.router, prefix=API_PREFIX)

# -----------------------------
# Error mapping
# -----------------------------


@app.exception_handler(LobbyError)
async def lobby_error_handler(request: Request, exc: LobbyError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def bad_request_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are a plain 400, same as an out-of-range imposter count
    return JSONResponse(status_code=400, content={"detail": "invalid request"})


logger.info("Imposter lobby API mounted at %s", API_PREFIX or "/")

__all__ = ["app"]
