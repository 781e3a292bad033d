"""KSUID: 4-byte seconds offset from 2014-05-13 + 16 random bytes, base62, 27 chars."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime

from .alphabet import BASE62_KSUID, Alphabet
from .errors import InvalidCharacter, InvalidLength
from .providers import Clock, RandomSource, datetime_from_ms, secure_random, system_clock

KSUID_EPOCH = 1400000000
KSUID_LENGTH = 27
KSUID_BYTES = 20
PAYLOAD_BYTES = 16
MAX_OFFSET = 0xFFFFFFFF

BASE62 = Alphabet(BASE62_KSUID)


@dataclass(frozen=True)
class KsuidInfo:
    ksuid: str
    timestamp: int
    payload: bytes

    @property
    def offset(self) -> int:
        return self.timestamp - KSUID_EPOCH

    @property
    def raw(self) -> bytes:
        return struct.pack(">I", self.offset) + self.payload

    @property
    def created_at(self) -> datetime:
        return datetime_from_ms(self.timestamp * 1000)


def encode_ksuid(timestamp: int, payload: bytes) -> str:
    """Encode Unix seconds ``timestamp`` and a 16-byte ``payload``."""
    offset = int(timestamp) - KSUID_EPOCH
    if not 0 <= offset <= MAX_OFFSET:
        raise ValueError("timestamp outside the KSUID 32-bit window starting at 1400000000")
    data = bytes(payload)
    if len(data) != PAYLOAD_BYTES:
        raise ValueError(f"KSUID payload must be exactly {PAYLOAD_BYTES} bytes")
    raw = struct.pack(">I", offset) + data
    return BASE62.encode_int(int.from_bytes(raw, "big"), pad_to=KSUID_LENGTH)


def generate_ksuid(*, clock: Clock = system_clock, random_source: RandomSource = secure_random) -> str:
    return encode_ksuid(clock() // 1_000_000_000, random_source(PAYLOAD_BYTES))


def parse_ksuid(text: str) -> KsuidInfo:
    candidate = str(text or "").strip()
    if len(candidate) != KSUID_LENGTH:
        raise InvalidLength(f"KSUID must be exactly {KSUID_LENGTH} characters (got {len(candidate)})")
    value = BASE62.decode_int(candidate)
    if value >> (KSUID_BYTES * 8):
        raise InvalidCharacter("KSUID value exceeds 160 bits")
    raw = value.to_bytes(KSUID_BYTES, "big")
    (offset,) = struct.unpack(">I", raw[:4])
    return KsuidInfo(ksuid=candidate, timestamp=offset + KSUID_EPOCH, payload=raw[4:])


def is_ksuid(text: str) -> bool:
    try:
        parse_ksuid(text)
    except ValueError:
        return False
    return True
