"""
Error taxonomy for the challenger.

Per-game failures (QueryFailure, MalformedRecord) are absorbed by the scanner.
BondUnavailable is fatal at startup. SubmissionFailure aborts the current
selection and returns control to scanning. "Not found" is never an error:
adapters return None for empty or zero-address results.
"""

from typing import Any, Optional


class ChallengerError(Exception):
    """Base class for challenger errors."""
    pass


class QueryFailure(ChallengerError):
    """A ledger read failed (transport error, bad response, RPC error)."""

    def __init__(self, message: str, method: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.method = method
        self.cause = cause


class RpcResponseError(QueryFailure):
    """The endpoint answered with a JSON-RPC error object."""

    def __init__(self, method: str, code: int, message: str, data: Any = None):
        super().__init__(f"RPC error {code} from {method}: {message}", method)
        self.code = code
        self.rpc_message = message
        self.data = data


class MalformedRecord(ChallengerError):
    """A claim record does not match the expected fixed layout."""
    pass


class BondUnavailable(ChallengerError):
    """No bond could be resolved for the configured game type."""

    def __init__(self, message: str, game_type: int):
        super().__init__(message)
        self.game_type = game_type


class SubmissionFailure(ChallengerError):
    """The challenge transaction could not be broadcast or was reverted."""

    def __init__(self, message: str, game_address: str, tx_hash: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.game_address = game_address
        self.tx_hash = tx_hash
        self.cause = cause


class ResolutionTimeout(ChallengerError):
    """The resolution tracker hit its configured liveness bound."""

    def __init__(self, message: str, game_address: str, observed: int):
        super().__init__(message)
        self.game_address = game_address
        self.observed = observed


class ChallengeUnconfirmed(ChallengerError):
    """The challenge was broadcast but no receipt appeared in time.

    The bond may already be committed, so this is not a reason to pick
    another game.
    """

    def __init__(self, message: str, game_address: str, tx_hash: str):
        super().__init__(message)
        self.game_address = game_address
        self.tx_hash = tx_hash
