"""UUID generation (v1, v3, v4, v5, v6, v7) and layout-exact parsing.

Layout reminders:

- version nibble: high 4 bits of byte 6
- RFC 4122 variant: top two bits of byte 8 set to ``10``
- v1/v6 timestamps: 60-bit count of 100 ns ticks since 1582-10-15
- v7 timestamp: 48-bit Unix milliseconds
"""

from __future__ import annotations

import re
import struct
import uuid
from dataclasses import dataclass
from datetime import datetime

from .errors import InvalidCharacter, InvalidLength, InvalidVersion
from .providers import (
    NS_PER_MS,
    Clock,
    DigestFn,
    RandomSource,
    datetime_from_ms,
    md5,
    secure_random,
    sha1,
    system_clock,
)

GREGORIAN_UNIX_OFFSET = 0x01B21DD213814000
TICKS_PER_MS = 10_000
GENERATED_VERSIONS = (1, 3, 4, 5, 6, 7)
KNOWN_VERSIONS = range(1, 9)

NAMESPACES = {
    "dns": uuid.NAMESPACE_DNS,
    "url": uuid.NAMESPACE_URL,
    "oid": uuid.NAMESPACE_OID,
    "x500": uuid.NAMESPACE_X500,
}

NIL = uuid.UUID(int=0)
MAX = uuid.UUID(int=(1 << 128) - 1)

_HEX32_RE = re.compile(r"^[0-9a-f]{32}$")
_MULTICAST_BIT = 0x010000000000
_MAX_TICKS = (1 << 60) - 1
_MAX_NODE = (1 << 48) - 1
_MAX_CLOCK_SEQ = 0x3FFF


@dataclass(frozen=True)
class UuidInfo:
    uuid: uuid.UUID
    version: int
    variant: str
    timestamp_ms: int | None = None
    clock_seq: int | None = None
    node: int | None = None

    @property
    def created_at(self) -> datetime | None:
        if self.timestamp_ms is None:
            return None
        return datetime_from_ms(self.timestamp_ms)


def _stamp(raw: bytes, version: int) -> uuid.UUID:
    buf = bytearray(raw[:16])
    if len(buf) != 16:
        raise ValueError("uuid layout requires 16 bytes")
    buf[6] = (buf[6] & 0x0F) | (version << 4)
    buf[8] = (buf[8] & 0x3F) | 0x80
    return uuid.UUID(bytes=bytes(buf))


def _check_fields(ticks: int, clock_seq: int, node: int) -> None:
    if not 0 <= ticks <= _MAX_TICKS:
        raise ValueError("uuid timestamp out of 60-bit range")
    if not 0 <= clock_seq <= _MAX_CLOCK_SEQ:
        raise ValueError("uuid clock sequence out of 14-bit range")
    if not 0 <= node <= _MAX_NODE:
        raise ValueError("uuid node out of 48-bit range")


def ticks_from_unix_ns(unix_ns: int) -> int:
    return unix_ns // 100 + GREGORIAN_UNIX_OFFSET


def ticks_to_unix_ms(ticks: int) -> int:
    return (ticks - GREGORIAN_UNIX_OFFSET) // TICKS_PER_MS


def uuid1(ticks: int, clock_seq: int, node: int) -> uuid.UUID:
    _check_fields(ticks, clock_seq, node)
    time_low = ticks & 0xFFFFFFFF
    time_mid = (ticks >> 32) & 0xFFFF
    time_hi = (ticks >> 48) & 0x0FFF
    value = (
        (time_low << 96)
        | (time_mid << 80)
        | ((0x1000 | time_hi) << 64)
        | ((0x8000 | clock_seq) << 48)
        | node
    )
    return uuid.UUID(int=value)


def uuid6(ticks: int, clock_seq: int, node: int) -> uuid.UUID:
    _check_fields(ticks, clock_seq, node)
    value = (
        ((ticks >> 12) << 80)
        | ((0x6000 | (ticks & 0x0FFF)) << 64)
        | ((0x8000 | clock_seq) << 48)
        | node
    )
    return uuid.UUID(int=value)


def uuid3(namespace: uuid.UUID, name: str | bytes, digest: DigestFn = md5) -> uuid.UUID:
    data = name.encode("utf-8") if isinstance(name, str) else bytes(name)
    return _stamp(digest(namespace.bytes + data), 3)


def uuid5(namespace: uuid.UUID, name: str | bytes, digest: DigestFn = sha1) -> uuid.UUID:
    data = name.encode("utf-8") if isinstance(name, str) else bytes(name)
    return _stamp(digest(namespace.bytes + data), 5)


def uuid4(random_bytes: bytes) -> uuid.UUID:
    return _stamp(bytes(random_bytes), 4)


def uuid7(unix_ms: int, random_bytes: bytes) -> uuid.UUID:
    if not 0 <= unix_ms < (1 << 48):
        raise ValueError("uuid7 timestamp out of 48-bit range")
    rand = bytes(random_bytes)
    if len(rand) < 10:
        raise ValueError("uuid7 requires 10 random bytes")
    ts_bytes = struct.pack(">Q", unix_ms)[2:]  # last 6 bytes
    return _stamp(ts_bytes + rand[:10], 7)


def resolve_namespace(value: str | uuid.UUID) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    key = str(value or "").strip().lower()
    if key in NAMESPACES:
        return NAMESPACES[key]
    return parse_uuid(key).uuid


def generate_uuid(
    version: int = 4,
    *,
    clock: Clock = system_clock,
    random_source: RandomSource = secure_random,
    namespace: str | uuid.UUID = "dns",
    name: str | bytes = "",
    digest: DigestFn | None = None,
) -> uuid.UUID:
    v = int(version)
    if v in (1, 6):
        ticks = ticks_from_unix_ns(clock())
        clock_seq = int.from_bytes(random_source(2), "big") & _MAX_CLOCK_SEQ
        node = int.from_bytes(random_source(6), "big") | _MULTICAST_BIT
        return uuid1(ticks, clock_seq, node) if v == 1 else uuid6(ticks, clock_seq, node)
    if v == 3:
        return uuid3(resolve_namespace(namespace), name, digest or md5)
    if v == 4:
        return uuid4(random_source(16))
    if v == 5:
        return uuid5(resolve_namespace(namespace), name, digest or sha1)
    if v == 7:
        return uuid7(clock() // NS_PER_MS, random_source(10))
    raise InvalidVersion(f"cannot generate UUID version {version!r} (supported: {GENERATED_VERSIONS})")


def variant_name(value: uuid.UUID) -> str:
    b = value.bytes[8]
    if b & 0x80 == 0:
        return "NCS"
    if b & 0xC0 == 0x80:
        return "RFC4122"
    if b & 0xE0 == 0xC0:
        return "Microsoft"
    return "Future"


def _canonical_hex(text: str) -> str:
    s = str(text or "").strip().lower()
    if s.startswith("urn:uuid:"):
        s = s[len("urn:uuid:") :]
    if s.startswith("{") and s.endswith("}"):
        s = s[1:-1]
    if len(s) == 36:
        if any(s[i] != "-" for i in (8, 13, 18, 23)):
            raise InvalidCharacter("uuid dashes must sit at positions 8, 13, 18 and 23")
        s = s.replace("-", "")
        if len(s) != 32:
            raise InvalidCharacter("uuid contains unexpected dashes")
    elif len(s) != 32:
        raise InvalidLength(f"uuid must be 32 hex digits (got {len(s)} characters)")
    if not _HEX32_RE.match(s):
        raise InvalidCharacter("uuid contains non-hex characters")
    return s


def parse_uuid(text: str) -> UuidInfo:
    value = uuid.UUID(hex=_canonical_hex(text))
    if value in (NIL, MAX):
        return UuidInfo(uuid=value, version=0 if value == NIL else 15, variant=variant_name(value))
    version = (value.int >> 76) & 0xF
    if version not in KNOWN_VERSIONS:
        raise InvalidVersion(f"unknown uuid version nibble {version}")
    variant = variant_name(value)
    n = value.int
    if version == 1:
        ticks = ((n >> 64) & 0x0FFF) << 48 | ((n >> 80) & 0xFFFF) << 32 | (n >> 96)
    elif version == 6:
        ticks = (n >> 80) << 12 | ((n >> 64) & 0x0FFF)
    elif version == 7:
        return UuidInfo(uuid=value, version=7, variant=variant, timestamp_ms=n >> 80)
    else:
        return UuidInfo(uuid=value, version=version, variant=variant)
    return UuidInfo(
        uuid=value,
        version=version,
        variant=variant,
        timestamp_ms=ticks_to_unix_ms(ticks),
        clock_seq=(n >> 48) & _MAX_CLOCK_SEQ,
        node=n & _MAX_NODE,
    )


def is_uuid(text: str) -> bool:
    try:
        parse_uuid(text)
    except ValueError:
        return False
    return True


def format_uuid(
    value: uuid.UUID | str,
    *,
    uppercase: bool = False,
    dashes: bool = True,
    braces: bool = False,
) -> str:
    u = value if isinstance(value, uuid.UUID) else parse_uuid(value).uuid
    out = str(u) if dashes else u.hex
    if uppercase:
        out = out.upper()
    if braces:
        out = f"{{{out}}}"
    return out
