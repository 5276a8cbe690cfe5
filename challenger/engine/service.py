#!/usr/bin/env python3
"""
Challenger Service

Core workflow:
1. Resolve the challenger bond for the configured game type (fatal if unavailable)
2. Scan the newest games for one that can still be challenged
3. Challenge it with the bond attached
4. Track the proposer's prove / resolve / reward transactions
5. Stop after one completed cycle; otherwise sleep and scan again
"""

import asyncio
import logging
from typing import Optional, Set

from challenger.config import ChallengerConfig
from challenger.core.events import ChallengerEvent, emit
from challenger.core.setup import logger
from challenger.core.types import ResolutionOutcome
from challenger.engine.bond import BondResolver
from challenger.engine.scanner import GameScanner
from challenger.engine.submitter import ChallengeSubmitter
from challenger.engine.tracker import ResolutionTracker
from challenger.net.ledger import LedgerQueryAdapter
from challenger.net.sender import TransactionSender
from challenger.utils.errors import QueryFailure, SubmissionFailure
from challenger.utils.rpc_client import RpcClient


class ChallengerService:
    """Drives the scan -> challenge -> track loop for a single bonded identity."""

    def __init__(
        self,
        game_type: int,
        scanner: GameScanner,
        bond_resolver: BondResolver,
        submitter: ChallengeSubmitter,
        tracker: ResolutionTracker,
        fetch_interval: float = 30,
    ):
        self.game_type = game_type
        self.scanner = scanner
        self.bond_resolver = bond_resolver
        self.submitter = submitter
        self.tracker = tracker
        self.fetch_interval = fetch_interval
        self.running = False
        # Games whose challenge failed in this process; never retried.
        self.failed_games: Set[str] = set()

    @classmethod
    def from_config(cls, config: ChallengerConfig) -> "ChallengerService":
        rpc = RpcClient(config.l1_rpc, timeout=config.rpc_timeout, retry_config=config.retry)
        ledger = LedgerQueryAdapter(rpc, config.factory_address)
        sender = TransactionSender(ledger, config.private_key.get_secret_value())
        logger.info(f"Challenger address: {sender.address}")
        return cls(
            game_type=config.game_type,
            scanner=GameScanner(ledger, max_window=config.max_games_to_check),
            bond_resolver=BondResolver(ledger),
            submitter=ChallengeSubmitter(
                sender,
                receipt_timeout=config.receipt_timeout,
                explorer_url=config.explorer_url,
            ),
            tracker=ResolutionTracker(
                ledger,
                poll_interval=config.poll_interval,
                timeout=config.resolution_timeout,
                explorer_url=config.explorer_url,
            ),
            fetch_interval=config.fetch_interval,
        )

    async def run_iteration(self, bond: int) -> Optional[ResolutionOutcome]:
        """One scan pass. Returns the outcome if a game was challenged and resolved."""
        try:
            game = await self.scanner.scan(exclude=self.failed_games)
        except QueryFailure as e:
            emit(
                ChallengerEvent.QUERY_FAILED,
                f"Scan pass failed: {e}",
                level=logging.WARNING,
                method=e.method,
            )
            return None
        if game is None:
            return None

        try:
            receipt = await self.submitter.challenge(game, bond)
        except SubmissionFailure:
            self.failed_games.add(game.address.lower())
            return None

        return await self.tracker.track(game, receipt)

    async def run(self) -> Optional[ResolutionOutcome]:
        """Run until one challenge cycle completes or ``stop()`` is called.

        Raises:
            BondUnavailable: if no bond can be resolved for the game type
            ChallengeUnconfirmed: if a broadcast challenge never got a receipt;
                scanning stops so a second bond is never sent
        """
        logger.info("Starting challenger...")
        self.running = True

        bond = await self.bond_resolver.bond_for(self.game_type)

        while self.running:
            outcome = await self.run_iteration(bond)
            if outcome is not None:
                self.running = False
                return outcome
            logger.info(f"No games challenged, waiting {self.fetch_interval} seconds...")
            await asyncio.sleep(self.fetch_interval)
        return None

    def stop(self):
        self.running = False
        logger.info("Stopping challenger...")
