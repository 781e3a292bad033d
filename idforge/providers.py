"""Collaborators injected into generators: clock, random source, digests.

Nothing in the package reads the wall clock or an RNG except through these
callables, so tests can swap in frozen or seeded versions.
"""

from __future__ import annotations

import hashlib
import random
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Callable

from .errors import UnsupportedDigest

Clock = Callable[[], int]
RandomSource = Callable[[int], bytes]
DigestFn = Callable[[bytes], bytes]

NS_PER_MS = 1_000_000

DIGEST_NAMES = ("md5", "sha1", "sha256", "sha384", "sha512")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def system_clock() -> int:
    return time.time_ns()


def frozen_clock(unix_ms: int) -> Clock:
    value = int(unix_ms) * NS_PER_MS

    def _clock() -> int:
        return value

    return _clock


def stepping_clock(start_ms: int, step_ms: int = 1) -> Clock:
    """Clock that advances by ``step_ms`` after every read."""
    state = {"ms": int(start_ms)}

    def _clock() -> int:
        current = state["ms"]
        state["ms"] = current + int(step_ms)
        return current * NS_PER_MS

    return _clock


def datetime_from_ms(unix_ms: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=int(unix_ms))


def iso_from_ms(unix_ms: int) -> str:
    return datetime_from_ms(unix_ms).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def secure_random(n: int) -> bytes:
    return secrets.token_bytes(n)


def seeded_random(seed: int) -> RandomSource:
    # Not thread-safe; for tests only.
    rng = random.Random(seed)

    def _random(n: int) -> bytes:
        return rng.randbytes(n)

    return _random


def digest_fn(name: str) -> DigestFn:
    key = str(name or "").strip().lower().replace("-", "")
    if key not in DIGEST_NAMES:
        raise UnsupportedDigest(f"unsupported digest {name!r} (expected one of {', '.join(DIGEST_NAMES)})")

    def _digest(data: bytes) -> bytes:
        return hashlib.new(key, bytes(data)).digest()

    _digest.__name__ = key
    return _digest


md5 = digest_fn("md5")
sha1 = digest_fn("sha1")
sha256 = digest_fn("sha256")
