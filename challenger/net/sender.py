#!/usr/bin/env python3
"""
Transaction signing and broadcasting

Builds EIP-1559 transactions for the challenger account, signs them locally
with eth_account and broadcasts them with eth_sendRawTransaction. Inclusion
is confirmed separately by polling for the receipt.
"""

import asyncio
import time
from typing import Any, Dict, Optional

from eth_account import Account
from eth_utils import to_checksum_address

from challenger.core.setup import logger
from challenger.net.ledger import LedgerQueryAdapter, hex_to_int
from challenger.utils.errors import QueryFailure

# Gas estimate head-room, in percent.
GAS_MARGIN_PERCENT = 20
DEFAULT_PRIORITY_FEE = 1_000_000_000


class TransactionSender:
    """Signs and broadcasts transactions for one bonded identity."""

    def __init__(self, ledger: LedgerQueryAdapter, private_key: str):
        self.ledger = ledger
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    async def _fees(self) -> Dict[str, int]:
        base_fee = await self.ledger.base_fee()
        if base_fee is None:
            return {"gasPrice": await self.ledger.gas_price()}
        try:
            priority = await self.ledger.max_priority_fee()
        except QueryFailure as e:
            logger.debug(f"eth_maxPriorityFeePerGas unavailable ({e}); using default tip")
            priority = DEFAULT_PRIORITY_FEE
        return {
            "maxFeePerGas": base_fee * 2 + priority,
            "maxPriorityFeePerGas": priority,
        }

    async def build_transaction(self, to: str, data: str, value: int = 0) -> Dict[str, Any]:
        """Fill nonce, chain id, gas and fee fields for a call from this account."""
        to = to_checksum_address(to)
        call = {"from": self.address, "to": to, "value": hex(value), "data": data}
        gas = await self.ledger.estimate_gas(call)
        tx = {
            "chainId": await self.ledger.chain_id(),
            "nonce": await self.ledger.transaction_count(self.address),
            "to": to,
            "value": value,
            "data": data,
            "gas": gas * (100 + GAS_MARGIN_PERCENT) // 100,
        }
        tx.update(await self._fees())
        if "maxFeePerGas" in tx:
            tx["type"] = 2
        return tx

    def sign(self, tx: Dict[str, Any]) -> bytes:
        signed = self._account.sign_transaction(tx)
        return bytes(signed.raw_transaction)

    async def send(self, to: str, data: str, value: int = 0) -> str:
        """Sign and broadcast; returns the transaction hash without waiting for inclusion."""
        tx = await self.build_transaction(to, data, value)
        raw = self.sign(tx)
        logger.debug(f"Broadcasting tx nonce={tx['nonce']} to={tx['to']} value={value}")
        tx_hash = await self.ledger.rpc.send("eth_sendRawTransaction", ["0x" + raw.hex()])
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 120,
                               poll_interval: float = 2.0) -> Optional[Dict[str, Any]]:
        """Poll for the receipt until ``timeout`` elapses, then return None.

        A failed receipt read counts as "not mined yet": the transaction is
        already broadcast, so polling continues until the deadline.
        """
        deadline = time.monotonic() + timeout
        while True:
            try:
                receipt = await self.ledger.transaction_receipt(tx_hash)
            except QueryFailure as e:
                logger.warning(f"Receipt lookup for {tx_hash} failed: {e}. Retrying...")
                receipt = None
            if receipt:
                return receipt
            if time.monotonic() >= deadline:
                return None
            await asyncio.sleep(poll_interval)


def receipt_succeeded(receipt: Dict[str, Any]) -> bool:
    status = receipt.get("status")
    return status is not None and hex_to_int(status) == 1
