"""Snowflake-style 64-bit ids: 41-bit ms since epoch | 10-bit worker | 12-bit sequence.

The sequence is random unless the caller supplies one, so two ids generated
by the same worker in the same millisecond can collide. Callers that need
collision-free ids must pass a monotonic ``sequence``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from .errors import EmptyInput, InvalidCharacter, InvalidLength
from .providers import NS_PER_MS, Clock, RandomSource, datetime_from_ms, secure_random, system_clock

TWITTER_EPOCH_MS = 1288834974657
TIMESTAMP_BITS = 41
WORKER_BITS = 10
SEQUENCE_BITS = 12
MAX_TIMESTAMP = (1 << TIMESTAMP_BITS) - 1
MAX_WORKER = (1 << WORKER_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1
MAX_SNOWFLAKE = (1 << 64) - 1

_DIGITS_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class SnowflakeInfo:
    value: int
    timestamp_ms: int
    worker_id: int
    sequence: int
    epoch_ms: int = TWITTER_EPOCH_MS

    @property
    def created_at(self) -> datetime:
        return datetime_from_ms(self.timestamp_ms)


def compose_snowflake(elapsed_ms: int, worker_id: int, sequence: int) -> int:
    if not 0 <= elapsed_ms <= MAX_TIMESTAMP:
        raise ValueError("snowflake timestamp out of 41-bit range")
    if not 0 <= worker_id <= MAX_WORKER:
        raise ValueError(f"snowflake worker id must be 0-{MAX_WORKER}")
    if not 0 <= sequence <= MAX_SEQUENCE:
        raise ValueError(f"snowflake sequence must be 0-{MAX_SEQUENCE}")
    return (elapsed_ms << (WORKER_BITS + SEQUENCE_BITS)) | (worker_id << SEQUENCE_BITS) | sequence


def generate_snowflake(
    worker_id: int = 1,
    *,
    epoch_ms: int = TWITTER_EPOCH_MS,
    clock: Clock = system_clock,
    random_source: RandomSource = secure_random,
    sequence: int | None = None,
) -> int:
    elapsed = clock() // NS_PER_MS - int(epoch_ms)
    if elapsed < 0:
        raise ValueError("clock reads earlier than the snowflake epoch")
    if sequence is None:
        sequence = int.from_bytes(random_source(2), "big") & MAX_SEQUENCE
    return compose_snowflake(elapsed, int(worker_id), int(sequence))


def parse_snowflake(text: str | int, *, epoch_ms: int = TWITTER_EPOCH_MS) -> SnowflakeInfo:
    if isinstance(text, int):
        value = text
    else:
        s = str(text or "").strip()
        if not s:
            raise EmptyInput("empty snowflake")
        if not _DIGITS_RE.match(s):
            raise InvalidCharacter("snowflake must be a decimal unsigned integer")
        if len(s.lstrip("0")) > 20:
            raise InvalidLength("snowflake does not fit in 64 bits")
        value = int(s)
    if not 0 <= value <= MAX_SNOWFLAKE:
        raise InvalidLength("snowflake does not fit in 64 bits")
    elapsed = value >> (WORKER_BITS + SEQUENCE_BITS)
    return SnowflakeInfo(
        value=value,
        timestamp_ms=elapsed + int(epoch_ms),
        worker_id=(value >> SEQUENCE_BITS) & MAX_WORKER,
        sequence=value & MAX_SEQUENCE,
        epoch_ms=int(epoch_ms),
    )
