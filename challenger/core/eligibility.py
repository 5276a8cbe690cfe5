from challenger.core.types import ChallengeStatus, ClaimRecord, GameStatus


def is_challengeable(claim: ClaimRecord, game_status: int, now: int) -> bool:
    """Return True iff the game is unchallenged, before its deadline and still in progress.

    ``now`` is the ledger timestamp snapshot taken once for the whole scan pass.
    """
    return (
        claim.status == ChallengeStatus.UNCHALLENGED
        and now < claim.deadline
        and game_status == GameStatus.IN_PROGRESS
    )
