"""Newest-first scan of the dispute game registry."""

import logging
from typing import Collection, Optional

from challenger.core.claims import decode_claim_record
from challenger.core.eligibility import is_challengeable
from challenger.core.events import ChallengerEvent, emit
from challenger.core.setup import logger
from challenger.core.types import SelectedGame
from challenger.net.ledger import LedgerQueryAdapter
from challenger.utils.errors import MalformedRecord, QueryFailure


def scan_window(game_count: int, max_window: int) -> range:
    """Indices to check, newest first: ``count-1`` down to ``max(0, count-window)``."""
    if game_count <= 0:
        return range(0)
    start = max(0, game_count - max_window)
    return range(game_count - 1, start - 1, -1)


class GameScanner:
    """Finds the most recent challengeable game in a bounded window of the registry."""

    def __init__(self, ledger: LedgerQueryAdapter, max_window: int = 100):
        self.ledger = ledger
        self.max_window = max_window

    async def _check_game(self, address: str, now: int) -> bool:
        raw = await self.ledger.claim_data_of(address)
        claim = decode_claim_record(raw)
        game_status = await self.ledger.status_of(address)
        logger.trace(
            f"Game {address}: status={claim.status} deadline={claim.deadline} "
            f"game_status={game_status} now={now}"
        )
        return is_challengeable(claim, game_status, now)

    async def scan(self, exclude: Collection[str] = ()) -> Optional[SelectedGame]:
        """Return the first challengeable game, scanning newest-first, or None.

        Per-game lookup failures are reported and skipped. Failures reading the
        registry count or the ledger time end the pass and propagate.

        Args:
            exclude: lower-cased addresses that must not be selected again
        """
        emit(ChallengerEvent.SCAN_STARTED, "Checking for challengeable games...")

        game_count = await self.ledger.game_count()
        if game_count == 0:
            emit(ChallengerEvent.NO_GAME_FOUND, "No games exist yet", game_count=0)
            return None

        # One time snapshot for the whole pass.
        now = await self.ledger.current_ledger_timestamp()
        excluded = {a.lower() for a in exclude}

        window = scan_window(game_count, self.max_window)
        logger.debug(f"Scanning games {window.start}..{window.stop + 1} of {game_count} at t={now}")

        for index in window:
            try:
                address = await self.ledger.game_at_index(index)
                if address is None:
                    continue
                if address.lower() in excluded:
                    logger.debug(f"Skipping game {address} at index {index}: previous challenge failed")
                    continue
                if await self._check_game(address, now):
                    emit(
                        ChallengerEvent.GAME_FOUND,
                        f"Found challengeable game at index {index}",
                        index=index,
                        address=address,
                    )
                    return SelectedGame(address=address, index=index)
            except MalformedRecord as e:
                emit(
                    ChallengerEvent.RECORD_MALFORMED,
                    f"Skipping game at index {index}: {e}",
                    level=logging.WARNING,
                    index=index,
                )
            except QueryFailure as e:
                emit(
                    ChallengerEvent.QUERY_FAILED,
                    f"Failed to check game at index {index}: {e}",
                    level=logging.WARNING,
                    index=index,
                    method=e.method,
                )

        emit(ChallengerEvent.NO_GAME_FOUND, "No challengeable games found", game_count=game_count)
        return None
