"""Arbitrary-precision integer parsing and formatting in bases 2-36."""

from __future__ import annotations

import re

from .alphabet import BASE36_DIGITS, Alphabet
from .errors import EmptyInput, InvalidDigit, UnsupportedBase

MIN_BASE = 2
MAX_BASE = 36

_DIGITS = Alphabet(BASE36_DIGITS, case_insensitive=True)
_WS_RE = re.compile(r"\s+")
_PREFIXES = {16: "0x", 2: "0b", 8: "0o"}


def _require_base(base: int) -> int:
    if not isinstance(base, int) or isinstance(base, bool) or not MIN_BASE <= base <= MAX_BASE:
        raise UnsupportedBase(f"unsupported base {base!r} (expected {MIN_BASE}-{MAX_BASE})")
    return base


def parse_int(text: str, base: int) -> int:
    _require_base(base)
    clean = _WS_RE.sub("", str(text or ""))
    if not clean:
        raise EmptyInput("empty number")
    value = 0
    for ch in clean:
        digit = _DIGITS.digit(ch, error=InvalidDigit)
        if digit >= base:
            raise InvalidDigit(f"invalid digit {ch!r} for base {base}")
        value = value * base + digit
    return value


def format_int(value: int, base: int) -> str:
    _require_base(base)
    if value < 0:
        raise ValueError("format_int supports unsigned integers only")
    if value == 0:
        return "0"
    chars: list[str] = []
    n = value
    while n > 0:
        n, rem = divmod(n, base)
        chars.append(BASE36_DIGITS[rem])
    return "".join(reversed(chars))


def strip_base_prefix(text: str, base: int) -> str:
    trimmed = str(text or "").strip()
    prefix = _PREFIXES.get(base)
    if prefix and trimmed[:2].lower() == prefix:
        return trimmed[2:]
    return trimmed


def convert_base(text: str, from_base: int, to_base: int) -> str:
    return format_int(parse_int(strip_base_prefix(text, from_base), from_base), to_base)


def number_bases(text: str, from_base: int = 10) -> dict[str, str]:
    value = parse_int(strip_base_prefix(text, from_base), from_base)
    return {
        "binary": format_int(value, 2),
        "octal": format_int(value, 8),
        "decimal": format_int(value, 10),
        "hexadecimal": format_int(value, 16).upper(),
    }
