from __future__ import annotations

import pytest

from challenger.engine.bond import BondResolver
from challenger.utils.errors import BondUnavailable

from conftest import FakeLedger

IMPL = "0x" + "22" * 20


@pytest.mark.asyncio
async def test_bond_is_read_from_implementation(ledger: FakeLedger) -> None:
    ledger.implementations[42] = IMPL
    ledger.bonds[IMPL] = 10**15
    assert await BondResolver(ledger).bond_for(42) == 10**15


@pytest.mark.asyncio
async def test_bond_is_cached_per_game_type(ledger: FakeLedger) -> None:
    ledger.implementations[42] = IMPL
    ledger.bonds[IMPL] = 5
    resolver = BondResolver(ledger)
    await resolver.bond_for(42)
    ledger.bonds[IMPL] = 6
    assert await resolver.bond_for(42) == 5
    assert ledger.bond_queries == 1


@pytest.mark.asyncio
async def test_missing_implementation_is_unavailable(ledger: FakeLedger) -> None:
    with pytest.raises(BondUnavailable) as exc:
        await BondResolver(ledger).bond_for(1)
    assert exc.value.game_type == 1


@pytest.mark.asyncio
async def test_zero_bond_is_unavailable(ledger: FakeLedger) -> None:
    ledger.implementations[1] = IMPL
    with pytest.raises(BondUnavailable):
        await BondResolver(ledger).bond_for(1)
