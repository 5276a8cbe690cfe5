#!/usr/bin/env python3
from __future__ import annotations
__version__ = "0.1.0"

# --------------------------------------------------------------------------- #
#                                Logging                                      #
# --------------------------------------------------------------------------- #
from challenger.core.setup import (
    logger, setup_logging
)

# --------------------------------------------------------------------------- #
#                                 Types                                       #
# --------------------------------------------------------------------------- #
from challenger.core.types import (
    ChallengeStatus,
    GameStatus,
    ResolutionStage,
    ClaimRecord,
    SelectedGame,
    ChallengeReceipt,
    ResolutionEvent,
    ResolutionOutcome,
)
from challenger.core.claims import decode_claim_record, encode_claim_record
from challenger.core.eligibility import is_challengeable

# --------------------------------------------------------------------------- #
#                                 Errors                                      #
# --------------------------------------------------------------------------- #
from challenger.utils.errors import (
    ChallengerError,
    QueryFailure,
    MalformedRecord,
    BondUnavailable,
    SubmissionFailure,
    ChallengeUnconfirmed,
    ResolutionTimeout,
)

# --------------------------------------------------------------------------- #
#                                 Engine                                      #
# --------------------------------------------------------------------------- #
from challenger.engine import (
    GameScanner,
    BondResolver,
    ChallengeSubmitter,
    ResolutionTracker,
    ChallengerService,
)
