"""Post-challenge resolution tracking.

After the challenge is mined, every transaction sent to the game is counted
in block-then-position order. Stages are assigned purely by arrival order
(1st proved, 2nd resolved, 3rd rewarded); transaction contents are never
inspected. The tracker does not detect reorgs: a block is read once, after
it first appears as latest or older.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Set

from challenger.core.events import ChallengerEvent, emit, tx_link
from challenger.core.setup import logger
from challenger.core.types import (
    ChallengeReceipt,
    ResolutionEvent,
    ResolutionOutcome,
    ResolutionStage,
    SelectedGame,
)
from challenger.net.ledger import LedgerQueryAdapter
from challenger.utils.errors import QueryFailure, ResolutionTimeout

REQUIRED_TRANSACTIONS = 3


@dataclass
class TrackerState:
    game: SelectedGame
    challenge_tx: str
    next_block: int
    required: int = REQUIRED_TRANSACTIONS
    events: List[ResolutionEvent] = field(default_factory=list)
    seen: Set[str] = field(default_factory=set)

    @property
    def count(self) -> int:
        return len(self.events)

    @property
    def complete(self) -> bool:
        return self.count >= self.required

    def record(self, tx_hash: str, recipient: Optional[str], block_number: int) -> Optional[ResolutionEvent]:
        """Count ``tx_hash`` if it targets the game. Returns the new event or None."""
        if recipient is None or recipient.lower() != self.game.address.lower():
            return None
        key = tx_hash.lower()
        if key == self.challenge_tx.lower() or key in self.seen:
            return None
        self.seen.add(key)
        ordinal = self.count + 1
        event = ResolutionEvent(
            ordinal=ordinal,
            stage=ResolutionStage.for_ordinal(ordinal),
            tx_hash=tx_hash,
            block_number=block_number,
        )
        self.events.append(event)
        return event


class ResolutionTracker:
    """Watches new blocks until the challenged game has been proved, resolved and rewarded."""

    def __init__(
        self,
        ledger: LedgerQueryAdapter,
        poll_interval: float = 5.0,
        timeout: Optional[float] = None,
        explorer_url: str = "",
        required: int = REQUIRED_TRANSACTIONS,
    ):
        self.ledger = ledger
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.explorer_url = explorer_url
        self.required = required

    def _report(self, state: TrackerState, event: ResolutionEvent) -> None:
        verb = "rewarded from" if event.stage is ResolutionStage.REWARDED else event.stage.value
        emit(
            ChallengerEvent.RESOLUTION_STAGE,
            f"Proposer {verb} the game: {tx_link(self.explorer_url, event.tx_hash)}",
            address=state.game.address,
            stage=event.stage.value,
            ordinal=event.ordinal,
            tx_hash=event.tx_hash,
            block_number=event.block_number,
        )

    async def _scan_block(self, state: TrackerState, block_number: int) -> None:
        for tx_hash in await self.ledger.block_transaction_ids(block_number):
            if state.complete:
                return
            if tx_hash.lower() in state.seen:
                continue
            recipient = await self.ledger.transaction_recipient(tx_hash)
            event = state.record(tx_hash, recipient, block_number)
            if event is not None:
                self._report(state, event)

    async def poll(self, state: TrackerState) -> None:
        """Scan every block from ``state.next_block`` through the current latest block.

        A block whose read fails stays at the head of the window and is read
        again on the next poll; already counted transactions are skipped.
        """
        latest = await self.ledger.latest_block_number()
        while state.next_block <= latest and not state.complete:
            try:
                await self._scan_block(state, state.next_block)
            except QueryFailure as e:
                emit(
                    ChallengerEvent.QUERY_FAILED,
                    f"Failed to read block {state.next_block}, retrying next poll: {e}",
                    level=logging.WARNING,
                    block_number=state.next_block,
                    method=e.method,
                )
                return
            state.next_block += 1

    async def track(self, game: SelectedGame, receipt: ChallengeReceipt) -> ResolutionOutcome:
        """Block until ``required`` transactions to ``game`` are observed.

        Raises:
            ResolutionTimeout: when a timeout is configured and elapses first
        """
        start_block = receipt.block_number
        if start_block is None:
            start_block = await self.ledger.latest_block_number()
        state = TrackerState(
            game=game,
            challenge_tx=receipt.tx_hash,
            next_block=start_block,
            required=self.required,
        )
        logger.info("Waiting for proposer to prove and resolve the game...")

        deadline = time.monotonic() + self.timeout if self.timeout else None
        while not state.complete:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.poll(state)
            except QueryFailure as e:
                emit(
                    ChallengerEvent.QUERY_FAILED,
                    f"Failed to read latest block: {e}",
                    level=logging.WARNING,
                    method=e.method,
                )
            if not state.complete and deadline is not None and time.monotonic() >= deadline:
                msg = (
                    f"Game {game.address} saw {state.count}/{state.required} resolution "
                    f"transactions within {self.timeout}s"
                )
                emit(
                    ChallengerEvent.RESOLUTION_TIMEOUT,
                    msg,
                    level=logging.ERROR,
                    address=game.address,
                    observed=state.count,
                )
                raise ResolutionTimeout(msg, game.address, state.count)

        emit(
            ChallengerEvent.CYCLE_COMPLETE,
            f"Game {game.address} has been resolved as DEFENDER_WINS and the proposer has been rewarded!",
            address=game.address,
            index=game.index,
            challenge_tx=receipt.tx_hash,
        )
        return ResolutionOutcome(game=game, challenge_tx=receipt.tx_hash, events=list(state.events))
