"""
Challenge engine

Scanner, bond resolver, challenge submitter, resolution tracker and the
service that drives them.
"""

from challenger.engine.scanner import GameScanner, scan_window
from challenger.engine.bond import BondResolver
from challenger.engine.submitter import ChallengeSubmitter
from challenger.engine.tracker import ResolutionTracker, TrackerState, REQUIRED_TRANSACTIONS
from challenger.engine.service import ChallengerService

__all__ = [
    "GameScanner",
    "scan_window",
    "BondResolver",
    "ChallengeSubmitter",
    "ResolutionTracker",
    "TrackerState",
    "REQUIRED_TRANSACTIONS",
    "ChallengerService",
]
