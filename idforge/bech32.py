"""Bech32 (BIP-173) and Bech32m (BIP-350) strings over 5-bit words."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidCharacter, InvalidChecksum, InvalidHrp, LengthMismatch, MixedCase

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
SEPARATOR = "1"
CHECKSUM_LENGTH = 6
DEFAULT_LIMIT = 90
MAX_HRP_LENGTH = 83

_CHARSET_INDEX = {c: i for i, c in enumerate(CHARSET)}
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


class Bech32Variant(Enum):
    BECH32 = "bech32"
    BECH32M = "bech32m"

    @property
    def constant(self) -> int:
        return 1 if self is Bech32Variant.BECH32 else 0x2BC830A3

    @classmethod
    def parse(cls, value: "str | Bech32Variant") -> "Bech32Variant":
        if isinstance(value, Bech32Variant):
            return value
        key = str(value or "").strip().lower()
        for v in cls:
            if v.value == key:
                return v
        raise ValueError(f"unknown bech32 variant {value!r} (expected bech32 or bech32m)")


@dataclass(frozen=True)
class Bech32Decoded:
    hrp: str
    words: tuple[int, ...]
    variant: Bech32Variant


def _polymod(values: list[int]) -> int:
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i, g in enumerate(_GENERATOR):
            if (top >> i) & 1:
                chk ^= g
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _checksum(hrp: str, words: list[int], variant: Bech32Variant) -> list[int]:
    pm = _polymod(_hrp_expand(hrp) + words + [0] * CHECKSUM_LENGTH) ^ variant.constant
    return [(pm >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def _check_hrp(hrp: str) -> str:
    if not hrp:
        raise InvalidHrp("bech32 human-readable part is empty")
    if len(hrp) > MAX_HRP_LENGTH:
        raise InvalidHrp(f"bech32 human-readable part exceeds {MAX_HRP_LENGTH} characters")
    for ch in hrp:
        if not 33 <= ord(ch) <= 126:
            raise InvalidHrp(f"invalid bech32 human-readable character {ch!r}")
    return hrp


def bech32_encode(
    hrp: str,
    words: "list[int] | tuple[int, ...]",
    variant: "Bech32Variant | str" = Bech32Variant.BECH32,
    *,
    limit: int = DEFAULT_LIMIT,
) -> str:
    v = Bech32Variant.parse(variant)
    prefix = _check_hrp(str(hrp or "")).lower()
    data = [int(w) for w in words]
    for w in data:
        if not 0 <= w < 32:
            raise ValueError(f"bech32 word out of range: {w}")
    total = len(prefix) + 1 + len(data) + CHECKSUM_LENGTH
    if total > limit:
        raise LengthMismatch(f"bech32 string would be {total} characters (limit {limit})")
    combined = data + _checksum(prefix, data, v)
    return prefix + SEPARATOR + "".join(CHARSET[w] for w in combined)


def bech32_decode(
    text: str,
    variant: "Bech32Variant | str | None" = None,
    *,
    limit: int = DEFAULT_LIMIT,
) -> Bech32Decoded:
    """Decode and verify a Bech32/Bech32m string.

    With ``variant=None`` the variant is taken from the checksum constant;
    otherwise a checksum for the other variant is an ``InvalidChecksum``.
    """
    s = str(text or "").strip()
    if len(s) > limit:
        raise LengthMismatch(f"bech32 string is {len(s)} characters (limit {limit})")
    if s.lower() != s and s.upper() != s:
        raise MixedCase("bech32 string mixes upper and lower case")
    s = s.lower()
    pos = s.rfind(SEPARATOR)
    if pos < 0:
        raise InvalidHrp("bech32 string has no separator")
    hrp = _check_hrp(s[:pos])
    data_part = s[pos + 1 :]
    if len(data_part) < CHECKSUM_LENGTH:
        raise LengthMismatch("bech32 data part is shorter than the checksum")
    words: list[int] = []
    for ch in data_part:
        w = _CHARSET_INDEX.get(ch)
        if w is None:
            raise InvalidCharacter(f"invalid bech32 character {ch!r}")
        words.append(w)
    residue = _polymod(_hrp_expand(hrp) + words)
    if variant is None:
        found = next((v for v in Bech32Variant if v.constant == residue), None)
        if found is None:
            raise InvalidChecksum("bech32 checksum mismatch")
    else:
        found = Bech32Variant.parse(variant)
        if residue != found.constant:
            raise InvalidChecksum(f"{found.value} checksum mismatch")
    return Bech32Decoded(hrp=hrp, words=tuple(words[:-CHECKSUM_LENGTH]), variant=found)


def _convert_bits(data: "bytes | list[int] | tuple[int, ...]", from_bits: int, to_bits: int, *, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out: list[int] = []
    maxv = (1 << to_bits) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError(f"value {value} does not fit in {from_bits} bits")
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits:
        raise LengthMismatch("excess padding in bech32 words")
    elif (acc << (to_bits - bits)) & maxv:
        raise LengthMismatch("non-zero padding in bech32 words")
    return out


def to_words(data: bytes) -> list[int]:
    return _convert_bits(bytes(data), 8, 5, pad=True)


def from_words(words: "list[int] | tuple[int, ...]") -> bytes:
    return bytes(_convert_bits(list(words), 5, 8, pad=False))
