"""Structured phase events.

Each event is logged through the package logger with ``record.event`` and
``record.fields`` attached, so a handler can consume them without parsing
the message text.
"""

import logging
from enum import Enum
from typing import Any

from challenger.core.setup import logger


class ChallengerEvent(str, Enum):
    SCAN_STARTED = "scan_started"
    GAME_FOUND = "game_found"
    NO_GAME_FOUND = "no_game_found"
    BOND_RESOLVED = "bond_resolved"
    BOND_UNAVAILABLE = "bond_unavailable"
    CHALLENGE_SUBMITTED = "challenge_submitted"
    CHALLENGE_FAILED = "challenge_failed"
    CHALLENGE_UNCONFIRMED = "challenge_unconfirmed"
    RESOLUTION_STAGE = "resolution_stage"
    RESOLUTION_TIMEOUT = "resolution_timeout"
    CYCLE_COMPLETE = "cycle_complete"
    QUERY_FAILED = "query_failed"
    RECORD_MALFORMED = "record_malformed"


def emit(event: ChallengerEvent, message: str, level: int = logging.INFO, **fields: Any) -> None:
    logger.log(level, message, extra={"event": event.value, "fields": fields})


def tx_link(explorer_url: str, tx_hash: str) -> str:
    """Explorer URL for a transaction, or the bare hash when no explorer is configured."""
    if not explorer_url:
        return tx_hash
    return f"{explorer_url.rstrip('/')}/tx/{tx_hash}"
