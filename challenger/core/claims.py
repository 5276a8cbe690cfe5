"""Fixed-layout claim record decoding.

``claimData()`` returns a static tuple ABI-encoded as one 32-byte word per
field. The layout is kept as an ordered schema; only the trailing two
fields (status, deadline) are decoded, by position from the end of the
record, so extra leading words from a wider layout do not shift them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from eth_abi import decode, encode

from challenger.core.types import ClaimRecord
from challenger.utils.errors import MalformedRecord

WORD_SIZE = 32


@dataclass(frozen=True)
class ClaimField:
    name: str
    abi_type: str
    width: int = WORD_SIZE


CLAIM_LAYOUT: Tuple[ClaimField, ...] = (
    ClaimField("parent_index", "uint32"),
    ClaimField("countered_by", "address"),
    ClaimField("prover", "address"),
    ClaimField("claim", "bytes32"),
    ClaimField("status", "uint8"),
    ClaimField("deadline", "uint64"),
)

DECODED_FIELDS = ("status", "deadline")


def _trailing_offsets(layout: Tuple[ClaimField, ...]) -> Dict[str, Tuple[int, ClaimField]]:
    """Map field name to (distance from end of record, field)."""
    offsets = {}
    distance = 0
    for f in reversed(layout):
        distance += f.width
        offsets[f.name] = (distance, f)
    return offsets


_OFFSETS = _trailing_offsets(CLAIM_LAYOUT)
MIN_RECORD_WIDTH = max(_OFFSETS[name][0] for name in DECODED_FIELDS)


def _decode_field(raw: bytes, name: str) -> int:
    distance, f = _OFFSETS[name]
    start = len(raw) - distance
    word = raw[start:start + f.width]
    try:
        (value,) = decode([f.abi_type], word)
    except Exception as e:
        raise MalformedRecord(f"Cannot decode claim field {name!r} as {f.abi_type}: {e}") from e
    return value


def decode_claim_record(raw: bytes) -> ClaimRecord:
    """Decode status and deadline from a raw ``claimData()`` result.

    Raises:
        MalformedRecord: if the record is too short or not word-aligned,
            or a field does not fit its declared type
    """
    if isinstance(raw, str):
        raw = bytes.fromhex(raw[2:] if raw.startswith("0x") else raw)
    if len(raw) < MIN_RECORD_WIDTH:
        raise MalformedRecord(
            f"Claim record is {len(raw)} bytes, expected at least {MIN_RECORD_WIDTH}"
        )
    if len(raw) % WORD_SIZE:
        raise MalformedRecord(f"Claim record length {len(raw)} is not a multiple of {WORD_SIZE}")
    return ClaimRecord(
        status=_decode_field(raw, "status"),
        deadline=_decode_field(raw, "deadline"),
    )


def encode_claim_record(
    status: int,
    deadline: int,
    parent_index: int = 0,
    countered_by: str = "0x" + "00" * 20,
    prover: str = "0x" + "00" * 20,
    claim: bytes = b"\x00" * 32,
) -> bytes:
    """Build a full claim record in the on-chain layout."""
    values = {
        "parent_index": parent_index,
        "countered_by": countered_by,
        "prover": prover,
        "claim": claim,
        "status": status,
        "deadline": deadline,
    }
    return encode([f.abi_type for f in CLAIM_LAYOUT], [values[f.name] for f in CLAIM_LAYOUT])
