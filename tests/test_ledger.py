from __future__ import annotations

from typing import Any, Dict, List

import pytest
from eth_abi import encode

from challenger.core.claims import decode_claim_record, encode_claim_record
from challenger.net.ledger import ZERO_ADDRESS, LedgerQueryAdapter, encode_call, selector

FACTORY = "0x" + "fa" * 20
GAME = "0x" + "0a" * 20


class _FakeRpc:
    """Answers eth_call by selector and other methods from a table."""

    def __init__(self) -> None:
        self.by_selector: Dict[str, str] = {}
        self.methods: Dict[str, Any] = {}
        self.calls: List[tuple] = []

    def answer(self, signature: str, types: List[str], values: List[Any]) -> None:
        self.by_selector[selector(signature).hex()] = "0x" + encode(types, values).hex()

    async def call(self, method: str, params=None) -> Any:
        self.calls.append((method, params))
        if method == "eth_call":
            data = params[0]["data"][2:]
            return self.by_selector.get(data[:8], "0x")
        return self.methods[method]


@pytest.fixture
def rpc() -> _FakeRpc:
    return _FakeRpc()


def test_encode_call_appends_abi_arguments() -> None:
    data = encode_call("gameAtIndex(uint256)", ["uint256"], [5])
    assert data.startswith("0x" + selector("gameAtIndex(uint256)").hex())
    assert data.endswith("05")
    assert len(data) == 2 + 2 * (4 + 32)


@pytest.mark.asyncio
async def test_game_count_and_game_at_index(rpc: _FakeRpc) -> None:
    rpc.answer("gameCount()", ["uint256"], [3])
    rpc.answer("gameAtIndex(uint256)", ["uint32", "uint64", "address"], [42, 1_700_000_000, GAME])
    ledger = LedgerQueryAdapter(rpc, FACTORY)

    assert await ledger.game_count() == 3
    address = await ledger.game_at_index(2)
    assert address is not None and address.lower() == GAME
    call = rpc.calls[-1][1][0]
    assert call["to"].lower() == FACTORY


@pytest.mark.asyncio
async def test_zero_address_is_not_found(rpc: _FakeRpc) -> None:
    rpc.answer("gameAtIndex(uint256)", ["uint32", "uint64", "address"], [0, 0, ZERO_ADDRESS])
    rpc.answer("gameImpls(uint32)", ["address"], [ZERO_ADDRESS])
    ledger = LedgerQueryAdapter(rpc, FACTORY)

    assert await ledger.game_at_index(0) is None
    assert await ledger.implementation_for(1) is None


@pytest.mark.asyncio
async def test_empty_results_are_not_found(rpc: _FakeRpc) -> None:
    ledger = LedgerQueryAdapter(rpc, FACTORY)
    assert await ledger.game_count() == 0
    assert await ledger.game_at_index(0) is None
    assert await ledger.implementation_for(1) is None


@pytest.mark.asyncio
async def test_claim_data_round_trips_through_adapter(rpc: _FakeRpc) -> None:
    raw = encode_claim_record(status=1, deadline=123)
    rpc.by_selector[selector("claimData()").hex()] = "0x" + raw.hex()
    rpc.answer("status()", ["uint8"], [2])
    rpc.answer("challengerBond()", ["uint256"], [10**18])
    ledger = LedgerQueryAdapter(rpc, FACTORY)

    claim = decode_claim_record(await ledger.claim_data_of(GAME))
    assert (claim.status, claim.deadline) == (1, 123)
    assert await ledger.status_of(GAME) == 2
    assert await ledger.challenger_bond_of(GAME) == 10**18


@pytest.mark.asyncio
async def test_block_and_transaction_introspection(rpc: _FakeRpc) -> None:
    rpc.methods["eth_blockNumber"] = "0x1f"
    rpc.methods["eth_getBlockByNumber"] = {"timestamp": "0x10", "transactions": ["0x01", "0x02"]}
    rpc.methods["eth_getTransactionByHash"] = {"to": GAME.upper().replace("0X", "0x")}
    ledger = LedgerQueryAdapter(rpc, FACTORY)

    assert await ledger.latest_block_number() == 31
    assert await ledger.current_ledger_timestamp() == 16
    assert await ledger.block_transaction_ids(5) == ["0x01", "0x02"]
    assert rpc.calls[-1] == ("eth_getBlockByNumber", ["0x5", False])
    recipient = await ledger.transaction_recipient("0x01")
    assert recipient is not None and recipient.lower() == GAME


@pytest.mark.asyncio
async def test_contract_creation_has_no_recipient(rpc: _FakeRpc) -> None:
    rpc.methods["eth_getTransactionByHash"] = {"to": None}
    ledger = LedgerQueryAdapter(rpc, FACTORY)
    assert await ledger.transaction_recipient("0x01") is None
