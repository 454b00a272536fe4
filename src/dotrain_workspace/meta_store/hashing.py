"""Content hashing and hex codec shared by the meta store and rainconfig."""

from __future__ import annotations

import re

from Crypto.Hash import keccak


HASH_SIZE = 32

_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


class HexDecodeError(ValueError):
    """Raised when a value is not a well-formed hex string."""


def keccak256(data: bytes) -> bytes:
    digest = keccak.new(digest_bits=256)
    digest.update(bytes(data))
    return digest.digest()


def decode_hex(value: str) -> bytes:
    """Decode a hex string with an optional ``0x`` prefix.

    Unlike ``bytes.fromhex`` this rejects embedded whitespace, so a value
    either is a contiguous even-length run of hex digits or it fails.
    """
    if not isinstance(value, str):
        raise HexDecodeError(f"expected hex string, got {type(value).__name__}")
    body = value[2:] if value[:2] in ("0x", "0X") else value
    if len(body) % 2:
        raise HexDecodeError(f"odd-length hex string ({len(body)} digits)")
    if not _HEX_PATTERN.fullmatch(body):
        bad = next(ch for ch in body if ch not in "0123456789abcdefABCDEF")
        raise HexDecodeError(f"invalid hex character {bad!r}")
    return bytes.fromhex(body)


def encode_hex(data: bytes, *, prefix: bool = True) -> str:
    body = bytes(data).hex()
    return f"0x{body}" if prefix else body
