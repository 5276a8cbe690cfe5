from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from challenger.core.claims import encode_claim_record
from challenger.core.types import ChallengeStatus, GameStatus
from challenger.utils.errors import QueryFailure

NOW = 1_700_000_000


def game_address(index: int) -> str:
    return "0x" + f"{index + 1:040x}"


class FakeLedger:
    """In-memory stand-in for LedgerQueryAdapter."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now
        self.games: List[Optional[str]] = []
        self.claims: Dict[str, bytes] = {}
        self.statuses: Dict[str, int] = {}
        self.implementations: Dict[int, str] = {}
        self.bonds: Dict[str, int] = {}
        self.blocks: Dict[int, List[str]] = {}
        self.recipients: Dict[str, Optional[str]] = {}
        self.latest_block = 0
        self.failing_games: set = set()
        self.failing_blocks: Dict[int, int] = {}
        self.timestamp_queries = 0
        self.checked_indices: List[int] = []
        self.bond_queries = 0

    # helpers --------------------------------------------------------------
    def add_game(
        self,
        status: int = ChallengeStatus.UNCHALLENGED,
        deadline: Optional[int] = None,
        game_status: int = GameStatus.IN_PROGRESS,
        raw: Optional[bytes] = None,
    ) -> str:
        index = len(self.games)
        address = game_address(index)
        self.games.append(address)
        if raw is None:
            raw = encode_claim_record(status=status, deadline=self.now + 3600 if deadline is None else deadline)
        self.claims[address] = raw
        self.statuses[address] = game_status
        return address

    def add_block(self, *txs: tuple) -> int:
        self.latest_block += 1
        self.blocks[self.latest_block] = [tx for tx, _ in txs]
        for tx, to in txs:
            self.recipients[tx] = to
        return self.latest_block

    # adapter surface ------------------------------------------------------
    async def game_count(self) -> int:
        return len(self.games)

    async def game_at_index(self, index: int) -> Optional[str]:
        self.checked_indices.append(index)
        if index in self.failing_games:
            raise QueryFailure(f"boom at {index}", "eth_call")
        return self.games[index]

    async def implementation_for(self, game_type: int) -> Optional[str]:
        return self.implementations.get(game_type)

    async def challenger_bond_of(self, implementation: str) -> int:
        self.bond_queries += 1
        return self.bonds.get(implementation, 0)

    async def claim_data_of(self, game: str) -> bytes:
        return self.claims[game]

    async def status_of(self, game: str) -> int:
        return self.statuses[game]

    async def current_ledger_timestamp(self) -> int:
        self.timestamp_queries += 1
        return self.now

    async def latest_block_number(self) -> int:
        return self.latest_block

    async def block_transaction_ids(self, block_number: int) -> List[str]:
        remaining = self.failing_blocks.get(block_number, 0)
        if remaining:
            self.failing_blocks[block_number] = remaining - 1
            raise QueryFailure(f"block {block_number} unavailable", "eth_getBlockByNumber")
        return list(self.blocks.get(block_number, []))

    async def transaction_recipient(self, tx_hash: str) -> Optional[str]:
        return self.recipients.get(tx_hash)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()
