import os
from datetime import timedelta

HOST_NAME = "Host"

IMPOSTER_ROLE = "imposter"
WORD_ROLE = "word"

# Room phases
WAITING = "waiting"
STARTED = "started"
ENDED = "ended"

CODE_LENGTH = 6
CODE_ALPHABET = "abcdefghijklmnopqrstuvwxyz"

LOBBY_TTL = timedelta(minutes=15)
SWEEP_INTERVAL_SECONDS = 60

IMPOSTER_ADDR = os.getenv("IMPOSTER_ADDR", "127.0.0.1:8080")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)
# Empty string disables the event log file
EVENT_LOG_FILE = os.getenv("EVENT_LOG_FILE", "lobbies.log")

__all__ = [
    "HOST_NAME",
    "IMPOSTER_ROLE",
    "WORD_ROLE",
    "WAITING",
    "STARTED",
    "ENDED",
    "CODE_LENGTH",
    "CODE_ALPHABET",
    "LOBBY_TTL",
    "SWEEP_INTERVAL_SECONDS",
    "IMPOSTER_ADDR",
    "API_PREFIX",
    "LOG_LEVEL",
    "LOG_FILE",
    "EVENT_LOG_FILE",
]
