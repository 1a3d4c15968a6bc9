from __future__ import annotations

import re
from typing import Any, Literal, Union

BlockTag = Literal["latest", "earliest", "pending", "safe", "finalized"]
BlockNumber = Union[int, BlockTag]

BLOCK_TAGS = frozenset({"latest", "earliest", "pending", "safe", "finalized"})

WORD_BITS = 256

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")
_QUANTITY_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def to_quantity(value: int) -> str:
    """Encode a non-negative integer as a JSON-RPC hex quantity (``0x1a``)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Quantity must be an int: {value!r}")
    if value < 0:
        raise ValueError(f"Quantity must be non-negative: {value}")
    return hex(value)


def from_quantity(value: Any) -> int:
    """Decode a JSON-RPC hex quantity into an int."""
    if not isinstance(value, str) or not _QUANTITY_RE.match(value):
        raise ValueError(f"Not a hex quantity: {value!r}")
    return int(value, 16)


def to_padded_word(value: int) -> str:
    """
    Encode a 256-bit word as ``0x`` followed by exactly 64 lowercase hex digits.

    Proof endpoints compare storage keys as strings, so the minimal
    quantity form (``0x1``) does not match ``0x00..01``.
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) > 32:
            raise ValueError(f"Word longer than 32 bytes: {len(value)}")
        value = int.from_bytes(value, "big")
    elif isinstance(value, str):
        if not _HEX_RE.match(value) or value == "0x":
            raise ValueError(f"Not a 0x-prefixed hex word: {value!r}")
        value = int(value, 16)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Word must be an int, bytes or hex string: {value!r}")
    if value < 0 or value >= 1 << WORD_BITS:
        raise ValueError(f"Word out of 256-bit range: {value}")
    return f"0x{value:064x}"


def hex_to_bytes(value: Any) -> bytes:
    if not isinstance(value, str) or not _HEX_RE.match(value) or len(value) % 2:
        raise ValueError(f"Not a 0x-prefixed even-length hex string: {value!r}")
    return bytes.fromhex(value[2:])


def bytes_to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def _fixed_hex(value: Any, size: int, kind: str) -> str:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raw = hex_to_bytes(value)
    if len(raw) != size:
        raise ValueError(f"{kind} must be {size} bytes, got {len(raw)}")
    return bytes_to_hex(raw)


def normalize_hash(value: Any) -> str:
    """Return a 32-byte hash as lowercase ``0x`` + 64 hex digits."""
    return _fixed_hex(value, 32, "Hash")


def normalize_address(value: Any) -> str:
    """Return a 20-byte address as lowercase ``0x`` + 40 hex digits."""
    return _fixed_hex(value, 20, "Address")


def block_number_param(block: BlockNumber) -> str:
    """Shape a block number or tag into its JSON-RPC parameter form."""
    if isinstance(block, str):
        if block not in BLOCK_TAGS:
            raise ValueError(
                f"Unknown block tag {block!r}; expected one of {sorted(BLOCK_TAGS)}"
            )
        return block
    return to_quantity(block)


def parse_block_ref(value: str) -> BlockNumber | str:
    """
    Parse a command-line block reference.

    Returns a normalized hash for 32-byte hex input, otherwise a
    block number (decimal or hex) or tag.
    """
    if value.startswith("0x") and len(value) == 66:
        return normalize_hash(value)
    if value in BLOCK_TAGS:
        return value  # type: ignore[return-value]
    if value.startswith("0x"):
        return from_quantity(value)
    if value.isdigit():
        return int(value)
    raise ValueError(f"Invalid block reference: {value}")
