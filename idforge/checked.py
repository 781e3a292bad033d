"""Base58Check: Base58 over ``payload || digest(digest(payload))[:4]``."""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from .bytecodec import decode_base58, encode_base58
from .errors import TooShort
from .providers import DigestFn, sha256

CHECKSUM_BYTES = 4


@dataclass(frozen=True)
class CheckedPayload:
    payload: bytes
    checksum: bytes
    valid: bool


def double_digest(digest: DigestFn) -> DigestFn:
    def _double(data: bytes) -> bytes:
        return digest(digest(data))

    return _double


def checksum(payload: bytes, digest: DigestFn = sha256) -> bytes:
    return double_digest(digest)(bytes(payload))[:CHECKSUM_BYTES]


def encode_checked(payload: bytes, digest: DigestFn = sha256) -> str:
    raw = bytes(payload)
    if not raw:
        raise TooShort("Base58Check payload must be at least 1 byte")
    return encode_base58(raw + checksum(raw, digest))


def decode_checked(text: str, digest: DigestFn = sha256) -> CheckedPayload:
    """Decode Base58Check text.

    A checksum mismatch is reported through ``valid`` rather than raised so
    callers can still look at the payload.
    """
    decoded = decode_base58(text)
    if len(decoded) < CHECKSUM_BYTES + 1:
        raise TooShort(f"Base58Check payload is {len(decoded)} bytes (need at least {CHECKSUM_BYTES + 1})")
    payload, found = decoded[:-CHECKSUM_BYTES], decoded[-CHECKSUM_BYTES:]
    expected = checksum(payload, digest)
    return CheckedPayload(payload=payload, checksum=found, valid=hmac.compare_digest(found, expected))
