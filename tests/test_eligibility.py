from __future__ import annotations

import pytest

from challenger.core.eligibility import is_challengeable
from challenger.core.types import ChallengeStatus, ClaimRecord, GameStatus

NOW = 1_000


def test_open_game_is_challengeable() -> None:
    claim = ClaimRecord(status=ChallengeStatus.UNCHALLENGED, deadline=NOW + 1)
    assert is_challengeable(claim, GameStatus.IN_PROGRESS, NOW)


@pytest.mark.parametrize("status", [s for s in ChallengeStatus if s != ChallengeStatus.UNCHALLENGED] + [9])
def test_any_other_challenge_status_is_rejected(status: int) -> None:
    claim = ClaimRecord(status=status, deadline=NOW + 10_000)
    assert not is_challengeable(claim, GameStatus.IN_PROGRESS, NOW)


@pytest.mark.parametrize("deadline", [NOW, NOW - 1, 0])
def test_deadline_reached_is_rejected(deadline: int) -> None:
    claim = ClaimRecord(status=ChallengeStatus.UNCHALLENGED, deadline=deadline)
    assert not is_challengeable(claim, GameStatus.IN_PROGRESS, NOW)


@pytest.mark.parametrize("game_status", [GameStatus.CHALLENGER_WINS, GameStatus.DEFENDER_WINS, 7])
def test_finished_game_is_rejected(game_status: int) -> None:
    claim = ClaimRecord(status=ChallengeStatus.UNCHALLENGED, deadline=NOW + 10_000)
    assert not is_challengeable(claim, game_status, NOW)
