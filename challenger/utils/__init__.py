from .errors import (
    ChallengerError,
    QueryFailure,
    RpcResponseError,
    MalformedRecord,
    BondUnavailable,
    SubmissionFailure,
    ChallengeUnconfirmed,
    ResolutionTimeout,
)
from .rpc_client import RpcClient, RpcSessionManager
