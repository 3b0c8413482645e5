"""Process entry point: serve ``imposter.app:app`` on ``IMPOSTER_ADDR``."""
from __future__ import annotations

import uvicorn

from .constants import IMPOSTER_ADDR
from .logging_config import get_logger

logger = get_logger(__name__)


def parse_addr(addr: str) -> tuple[str, int]:
    host, _, port = addr.rpartition(":")
    return host or "127.0.0.1", int(port)


def main() -> None:
    host, port = parse_addr(IMPOSTER_ADDR)
    logger.info("listening on %s:%d", host, port)
    uvicorn.run("imposter.app:app", host=host, port=port)


if __name__ == "__main__":
    main()
