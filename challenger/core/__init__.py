from challenger.core.setup import logger, setup_logging, TRACE
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
from challenger.core.claims import decode_claim_record, encode_claim_record, CLAIM_LAYOUT
from challenger.core.eligibility import is_challengeable
from challenger.core.events import ChallengerEvent, emit
