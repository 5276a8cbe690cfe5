from __future__ import annotations

import logging

import pytest

from challenger.core.events import ChallengerEvent, tx_link
from challenger.engine.scanner import GameScanner

from conftest import FakeLedger


def test_tx_link() -> None:
    assert tx_link("", "0xabc") == "0xabc"
    assert tx_link("https://explorer.example/", "0xabc") == "https://explorer.example/tx/0xabc"


@pytest.mark.asyncio
async def test_scan_emits_structured_events(ledger: FakeLedger, caplog) -> None:
    ledger.add_game(raw=b"\x01")
    target = ledger.add_game()
    ledger.failing_games.add(2)
    ledger.add_game()

    with caplog.at_level(logging.DEBUG, logger="challenger"):
        await GameScanner(ledger).scan()

    events = [r.event for r in caplog.records if hasattr(r, "event")]
    assert events == [
        ChallengerEvent.SCAN_STARTED.value,
        ChallengerEvent.QUERY_FAILED.value,
        ChallengerEvent.GAME_FOUND.value,
    ]
    found = [r for r in caplog.records if getattr(r, "event", None) == ChallengerEvent.GAME_FOUND.value][0]
    assert found.fields == {"index": 1, "address": target}
