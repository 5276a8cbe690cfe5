from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional


class ChallengeStatus(IntEnum):
    """Challenge status stored in a game's claim record."""

    UNCHALLENGED = 0
    CHALLENGED = 1
    UNCHALLENGED_AND_VALID_PROOF_PROVIDED = 2
    CHALLENGED_AND_VALID_PROOF_PROVIDED = 3
    RESOLVED = 4


class GameStatus(IntEnum):
    """Overall game status read from ``status()``. Anything above 0 is terminal."""

    IN_PROGRESS = 0
    CHALLENGER_WINS = 1
    DEFENDER_WINS = 2


class ResolutionStage(str, Enum):
    """Label given to the Nth transaction sent to a challenged game."""

    PROVED = "proved"
    RESOLVED = "resolved"
    REWARDED = "rewarded"

    @classmethod
    def for_ordinal(cls, ordinal: int) -> "ResolutionStage":
        """Classify by arrival order only: 1st proved, 2nd resolved, 3rd+ rewarded."""
        if ordinal < 1:
            raise ValueError(f"ordinal must be >= 1, got {ordinal}")
        if ordinal == 1:
            return cls.PROVED
        if ordinal == 2:
            return cls.RESOLVED
        return cls.REWARDED


@dataclass(frozen=True)
class ClaimRecord:
    """The two claim fields the challenger reads. Other fields stay opaque."""

    status: int
    deadline: int


@dataclass(frozen=True)
class SelectedGame:
    """A game chosen by the scanner."""

    address: str
    index: int


@dataclass(frozen=True)
class ChallengeReceipt:
    """Outcome of a confirmed challenge submission."""

    tx_hash: str
    block_number: Optional[int] = None


@dataclass(frozen=True)
class ResolutionEvent:
    """A transaction to the challenged game observed after the challenge."""

    ordinal: int
    stage: ResolutionStage
    tx_hash: str
    block_number: int


@dataclass
class ResolutionOutcome:
    """Result of one completed challenge cycle."""

    game: SelectedGame
    challenge_tx: str
    events: List[ResolutionEvent] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return any(e.stage is ResolutionStage.REWARDED for e in self.events)
