"""NanoID-style random strings over a configurable alphabet.

Characters are picked by masking random bytes to the next power of two above
the alphabet size and discarding out-of-range values, so every symbol is
equally likely.
"""

from __future__ import annotations

import math

from .errors import EmptyInput, InvalidCharacter, InvalidLength
from .providers import RandomSource, secure_random

DEFAULT_SIZE = 21

ALPHABETS = {
    "default": "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_-",
    "alphanumeric": "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz",
    "lowercase": "0123456789abcdefghijklmnopqrstuvwxyz",
    "numbers": "0123456789",
    "hex": "0123456789abcdef",
}
DEFAULT_ALPHABET = ALPHABETS["default"]


def resolve_alphabet(name_or_symbols: str) -> str:
    raw = str(name_or_symbols or "")
    return ALPHABETS.get(raw.strip().lower(), raw) if raw else DEFAULT_ALPHABET


def _check_alphabet(alphabet: str) -> str:
    if not 2 <= len(alphabet) <= 256:
        raise ValueError("nanoid alphabet must have 2-256 symbols")
    if len(set(alphabet)) != len(alphabet):
        raise ValueError("nanoid alphabet symbols must be unique")
    return alphabet


def generate_nanoid(
    size: int = DEFAULT_SIZE,
    alphabet: str = DEFAULT_ALPHABET,
    *,
    random_source: RandomSource = secure_random,
) -> str:
    size = int(size)
    if size < 1:
        raise ValueError("nanoid size must be positive")
    symbols = _check_alphabet(resolve_alphabet(alphabet))
    n = len(symbols)
    mask = (1 << (n - 1).bit_length()) - 1
    step = math.ceil(1.6 * mask * size / n)
    out: list[str] = []
    # Rejected bytes are retried from a fresh draw until the id is full.
    while True:
        for byte in random_source(step):
            index = byte & mask
            if index < n:
                out.append(symbols[index])
                if len(out) == size:
                    return "".join(out)


def parse_nanoid(text: str, alphabet: str = DEFAULT_ALPHABET, *, size: int | None = None) -> str:
    value = str(text or "").strip()
    if not value:
        raise EmptyInput("empty nanoid")
    if size is not None and len(value) != int(size):
        raise InvalidLength(f"nanoid must be exactly {size} characters (got {len(value)})")
    symbols = set(_check_alphabet(resolve_alphabet(alphabet)))
    for ch in value:
        if ch not in symbols:
            raise InvalidCharacter(f"invalid nanoid character {ch!r}")
    return value
