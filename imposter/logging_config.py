"""Logging setup shared by the whole service.

``setup_logging`` is called once at startup; every module then grabs its own
logger through ``get_logger(__name__)``. Lobby lifecycle events additionally
go to a dedicated ``imposter.events`` logger which appends one timestamped
line per event to the event log file.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

EVENT_LOGGER_NAME = "imposter.events"

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_EVENT_FORMAT = "[%(asctime)s] %(message)s"
_EVENT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    event_log_file: Optional[str] = None,
) -> None:
    """Configure the root logger and, if *event_log_file* is set, the event log."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    formatter = logging.Formatter(_LOG_FORMAT)
    if not root.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    events = logging.getLogger(EVENT_LOGGER_NAME)
    events.setLevel(logging.INFO)
    if event_log_file and not any(
        isinstance(h, logging.FileHandler) for h in events.handlers
    ):
        event_handler = logging.FileHandler(event_log_file, mode="a")
        event_handler.setFormatter(logging.Formatter(_EVENT_FORMAT, datefmt=_EVENT_DATEFMT))
        events.addHandler(event_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_event_logger() -> logging.Logger:
    return logging.getLogger(EVENT_LOGGER_NAME)


__all__ = ["setup_logging", "get_logger", "get_event_logger", "EVENT_LOGGER_NAME"]
