#!/usr/bin/env python3
"""
Ledger query adapter

Read-only access to the dispute game factory and individual games over
JSON-RPC:
- Registry reads (game count, game at index, implementation per game type)
- Game reads (claim data, status, challenger bond)
- Block and transaction introspection

Empty results and the zero address are "not found" and come back as None.
Transport and RPC failures raise QueryFailure.
"""

from typing import Any, Dict, List, Optional, Sequence

from eth_abi import decode, encode
from eth_utils import keccak, to_checksum_address

from challenger.core.setup import logger
from challenger.utils.errors import QueryFailure
from challenger.utils.rpc_client import RpcClient

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def selector(signature: str) -> bytes:
    """4-byte function selector for a canonical signature like ``gameAtIndex(uint256)``."""
    return keccak(text=signature)[:4]


def encode_call(signature: str, arg_types: Sequence[str] = (), args: Sequence[Any] = ()) -> str:
    """ABI-encode calldata as a 0x-prefixed hex string."""
    data = selector(signature)
    if arg_types:
        data += encode(list(arg_types), list(args))
    return "0x" + data.hex()


def hex_to_bytes(value: Optional[str]) -> bytes:
    if not value:
        return b""
    if value.startswith("0x") or value.startswith("0X"):
        value = value[2:]
    return bytes.fromhex(value)


def hex_to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    if not value:
        raise ValueError(f"empty quantity: {value!r}")
    return int(value, 16)


def _address_or_none(address: Optional[str]) -> Optional[str]:
    if not address or int(address, 16) == 0:
        return None
    return to_checksum_address(address)


class LedgerQueryAdapter:
    """Stateless wrapper around the ledger read RPC."""

    def __init__(self, rpc: RpcClient, factory_address: str):
        self.rpc = rpc
        self.factory_address = to_checksum_address(factory_address)

    # ------------------------------------------------------------------ #
    # Low level                                                          #
    # ------------------------------------------------------------------ #

    async def eth_call(self, to: str, signature: str, arg_types: Sequence[str] = (),
                       args: Sequence[Any] = ()) -> bytes:
        data = encode_call(signature, arg_types, args)
        result = await self.rpc.call("eth_call", [{"to": to, "data": data}, "latest"])
        try:
            return hex_to_bytes(result)
        except (ValueError, TypeError, AttributeError) as e:
            raise QueryFailure(f"Non-hex result for {signature} on {to}: {result!r}", "eth_call", e)

    async def _call_decoded(self, to: str, signature: str, output_types: Sequence[str],
                            arg_types: Sequence[str] = (), args: Sequence[Any] = ()) -> Optional[tuple]:
        raw = await self.eth_call(to, signature, arg_types, args)
        if not raw:
            return None
        try:
            return decode(list(output_types), raw)
        except Exception as e:
            raise QueryFailure(f"Cannot decode {signature} result from {to}: {e}", "eth_call", e)

    async def _quantity(self, method: str, params: Optional[List[Any]] = None) -> int:
        result = await self.rpc.call(method, params or [])
        try:
            return hex_to_int(result)
        except (ValueError, TypeError) as e:
            raise QueryFailure(f"Invalid quantity from {method}: {result!r}", method, e)

    # ------------------------------------------------------------------ #
    # Registry                                                           #
    # ------------------------------------------------------------------ #

    async def game_count(self) -> int:
        decoded = await self._call_decoded(self.factory_address, "gameCount()", ["uint256"])
        return decoded[0] if decoded else 0

    async def game_at_index(self, index: int) -> Optional[str]:
        """Proxy address of the game at ``index``. The proxy is the final word of the result."""
        raw = await self.eth_call(self.factory_address, "gameAtIndex(uint256)", ["uint256"], [index])
        if len(raw) < 32:
            return None
        try:
            (address,) = decode(["address"], raw[-32:])
        except Exception as e:
            raise QueryFailure(f"Cannot decode gameAtIndex({index}): {e}", "eth_call", e)
        return _address_or_none(address)

    async def implementation_for(self, game_type: int) -> Optional[str]:
        decoded = await self._call_decoded(
            self.factory_address, "gameImpls(uint32)", ["address"], ["uint32"], [game_type]
        )
        return _address_or_none(decoded[0]) if decoded else None

    # ------------------------------------------------------------------ #
    # Games                                                              #
    # ------------------------------------------------------------------ #

    async def challenger_bond_of(self, implementation: str) -> int:
        decoded = await self._call_decoded(implementation, "challengerBond()", ["uint256"])
        return decoded[0] if decoded else 0

    async def claim_data_of(self, game: str) -> bytes:
        return await self.eth_call(game, "claimData()")

    async def status_of(self, game: str) -> int:
        decoded = await self._call_decoded(game, "status()", ["uint8"])
        if decoded is None:
            raise QueryFailure(f"Empty status() result from {game}", "eth_call")
        return decoded[0]

    # ------------------------------------------------------------------ #
    # Blocks and transactions                                            #
    # ------------------------------------------------------------------ #

    async def _block(self, tag: Any, full: bool = False) -> Optional[Dict[str, Any]]:
        if isinstance(tag, int):
            tag = hex(tag)
        return await self.rpc.call("eth_getBlockByNumber", [tag, full])

    async def current_ledger_timestamp(self) -> int:
        block = await self._block("latest")
        try:
            return hex_to_int(block["timestamp"])
        except (KeyError, TypeError, ValueError) as e:
            raise QueryFailure(f"Latest block has no usable timestamp: {block!r}", "eth_getBlockByNumber", e)

    async def latest_block_number(self) -> int:
        return await self._quantity("eth_blockNumber")

    async def base_fee(self) -> Optional[int]:
        block = await self._block("latest")
        if not block or block.get("baseFeePerGas") is None:
            return None
        return hex_to_int(block["baseFeePerGas"])

    async def block_transaction_ids(self, block_number: int) -> List[str]:
        block = await self._block(block_number)
        if block is None:
            raise QueryFailure(f"Block {block_number} not available", "eth_getBlockByNumber")
        return [tx if isinstance(tx, str) else tx["hash"] for tx in block.get("transactions") or []]

    async def transaction_recipient(self, tx_hash: str) -> Optional[str]:
        tx = await self.rpc.call("eth_getTransactionByHash", [tx_hash])
        if not tx:
            logger.debug(f"Transaction {tx_hash} not found")
            return None
        return _address_or_none(tx.get("to"))

    async def transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return await self.rpc.call("eth_getTransactionReceipt", [tx_hash])

    # ------------------------------------------------------------------ #
    # Account and fee reads used when building transactions              #
    # ------------------------------------------------------------------ #

    async def chain_id(self) -> int:
        return await self._quantity("eth_chainId")

    async def transaction_count(self, address: str) -> int:
        return await self._quantity("eth_getTransactionCount", [address, "pending"])

    async def gas_price(self) -> int:
        return await self._quantity("eth_gasPrice")

    async def max_priority_fee(self) -> int:
        return await self._quantity("eth_maxPriorityFeePerGas")

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        return await self._quantity("eth_estimateGas", [tx])
