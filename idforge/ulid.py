"""ULID: 48-bit Unix-ms timestamp + 80 random bits as 26 Crockford Base32 chars.

The timestamp occupies the leading 10 characters, big-endian, so string
order matches creation order. Text and byte conversion goes through
``python-ulid``; the clock and random source stay injectable.
"""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from datetime import datetime

from ulid import ULID

from .errors import InvalidCharacter, InvalidLength
from .providers import NS_PER_MS, Clock, RandomSource, datetime_from_ms, secure_random, system_clock

ULID_LENGTH = 26
RANDOM_BYTES = 10
MAX_TIMESTAMP = (1 << 48) - 1

ULID_RE = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


@dataclass(frozen=True)
class UlidInfo:
    ulid: str
    timestamp_ms: int
    randomness: bytes

    @property
    def raw(self) -> bytes:
        return struct.pack(">Q", self.timestamp_ms)[2:] + self.randomness

    @property
    def created_at(self) -> datetime:
        return datetime_from_ms(self.timestamp_ms)


def encode_ulid(timestamp_ms: int, randomness: bytes) -> str:
    if not 0 <= timestamp_ms <= MAX_TIMESTAMP:
        raise ValueError("timestamp_ms out of ULID 48-bit range")
    rand = bytes(randomness)
    if len(rand) != RANDOM_BYTES:
        raise ValueError(f"ULID randomness must be exactly {RANDOM_BYTES} bytes")
    return str(ULID.from_bytes(struct.pack(">Q", timestamp_ms)[2:] + rand))


def generate_ulid(
    *,
    clock: Clock = system_clock,
    random_source: RandomSource = secure_random,
    lowercase: bool = False,
) -> str:
    value = encode_ulid(clock() // NS_PER_MS, random_source(RANDOM_BYTES))
    return value.lower() if lowercase else value


def decode_ulid(text: str) -> UlidInfo:
    candidate = str(text or "").strip().upper()
    if len(candidate) != ULID_LENGTH:
        raise InvalidLength(f"ULID must be exactly {ULID_LENGTH} characters (got {len(candidate)})")
    if not ULID_RE.match(candidate):
        raise InvalidCharacter("ULID contains characters outside Crockford base32")
    # 26 chars carry 130 bits; only the low 128 are valid.
    if candidate[0] > "7":
        raise InvalidCharacter(f"ULID overflows 128 bits (first character {candidate[0]!r} above '7')")
    try:
        parsed = ULID.from_str(candidate)
    except ValueError as e:
        raise InvalidCharacter(f"invalid ULID: {e}") from e
    return UlidInfo(ulid=candidate, timestamp_ms=parsed.milliseconds, randomness=parsed.bytes[6:])


def ulid_decode_timestamp(text: str) -> int:
    return decode_ulid(text).timestamp_ms


def ulid_from_bytes(raw: bytes) -> str:
    data = bytes(raw)
    if len(data) != 16:
        raise InvalidLength("ULID bytes must be exactly 16 bytes")
    return str(ULID.from_bytes(data))


def is_ulid(text: str) -> bool:
    try:
        decode_ulid(text)
    except ValueError:
        return False
    return True
