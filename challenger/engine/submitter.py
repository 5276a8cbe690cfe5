import logging

from challenger.core.events import ChallengerEvent, emit, tx_link
from challenger.core.setup import logger
from challenger.core.types import ChallengeReceipt, SelectedGame
from challenger.net.ledger import encode_call, hex_to_int
from challenger.net.sender import TransactionSender, receipt_succeeded
from challenger.utils.errors import ChallengeUnconfirmed, QueryFailure, SubmissionFailure

CHALLENGE_CALL = encode_call("challenge()")


class ChallengeSubmitter:
    """Sends the bonded ``challenge()`` call and waits for it to be mined."""

    def __init__(self, sender: TransactionSender, receipt_timeout: float = 120,
                 receipt_poll_interval: float = 2.0, explorer_url: str = ""):
        self.sender = sender
        self.receipt_timeout = receipt_timeout
        self.receipt_poll_interval = receipt_poll_interval
        self.explorer_url = explorer_url

    def _fail(self, game: SelectedGame, message: str, tx_hash=None, cause=None) -> SubmissionFailure:
        emit(
            ChallengerEvent.CHALLENGE_FAILED,
            f"Failed to challenge game {game.address}: {message}",
            level=logging.ERROR,
            address=game.address,
            index=game.index,
            tx_hash=tx_hash,
        )
        return SubmissionFailure(message, game.address, tx_hash=tx_hash, cause=cause)

    async def challenge(self, game: SelectedGame, bond: int) -> ChallengeReceipt:
        """Challenge ``game`` attaching exactly ``bond`` wei.

        Raises:
            SubmissionFailure: broadcast error or revert
            ChallengeUnconfirmed: broadcast succeeded but no receipt appeared in time
        """
        logger.info(f"Challenging game at address: {game.address}")
        try:
            tx_hash = await self.sender.send(game.address, CHALLENGE_CALL, value=bond)
        except QueryFailure as e:
            raise self._fail(game, str(e), cause=e) from e

        receipt = await self.sender.wait_for_receipt(
            tx_hash, timeout=self.receipt_timeout, poll_interval=self.receipt_poll_interval
        )
        if receipt is None:
            msg = f"Challenge {tx_hash} for game {game.address} has no receipt after {self.receipt_timeout}s"
            emit(
                ChallengerEvent.CHALLENGE_UNCONFIRMED,
                msg,
                level=logging.ERROR,
                address=game.address,
                index=game.index,
                tx_hash=tx_hash,
            )
            raise ChallengeUnconfirmed(msg, game.address, tx_hash)
        if not receipt_succeeded(receipt):
            raise self._fail(game, "challenge transaction reverted", tx_hash=tx_hash)

        block_number = hex_to_int(receipt["blockNumber"]) if receipt.get("blockNumber") else None
        emit(
            ChallengerEvent.CHALLENGE_SUBMITTED,
            f"Successfully challenged game: {tx_link(self.explorer_url, tx_hash)}",
            address=game.address,
            index=game.index,
            tx_hash=tx_hash,
            block_number=block_number,
        )
        return ChallengeReceipt(tx_hash=tx_hash, block_number=block_number)
