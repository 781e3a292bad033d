from __future__ import annotations

from dataclasses import dataclass, field

from .errors import CodecError, InvalidCharacter

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE58_BITCOIN = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE62_KSUID = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class Alphabet:
    """Ordered symbol set mapping digit values to characters and back."""

    symbols: str
    case_insensitive: bool = False
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.symbols) < 2:
            raise ValueError("alphabet requires at least 2 symbols")
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError("alphabet symbols must be unique")
        index: dict[str, int] = {}
        for i, ch in enumerate(self.symbols):
            index[ch] = i
            if self.case_insensitive:
                index[ch.lower()] = i
                index[ch.upper()] = i
        object.__setattr__(self, "_index", index)

    @property
    def radix(self) -> int:
        return len(self.symbols)

    @property
    def zero(self) -> str:
        return self.symbols[0]

    def digit(self, ch: str, *, error: type[CodecError] = InvalidCharacter) -> int:
        value = self._index.get(ch)
        if value is None:
            raise error(f"invalid character {ch!r} for base-{self.radix} alphabet")
        return value

    def encode_int(self, value: int, *, pad_to: int | None = None) -> str:
        if value < 0:
            raise ValueError("alphabet encoding supports unsigned integers only")
        chars: list[str] = []
        n = value
        while n > 0:
            n, rem = divmod(n, self.radix)
            chars.append(self.symbols[rem])
        encoded = "".join(reversed(chars)) if chars else self.zero
        if pad_to is not None and len(encoded) < pad_to:
            encoded = self.zero * (pad_to - len(encoded)) + encoded
        return encoded

    def decode_int(self, text: str, *, error: type[CodecError] = InvalidCharacter) -> int:
        n = 0
        for ch in text:
            n = n * self.radix + self.digit(ch, error=error)
        return n

    def encode_bytes(self, data: bytes) -> str:
        """Big-endian encoding that keeps each leading zero byte as one zero symbol."""
        raw = bytes(data)
        stripped = raw.lstrip(b"\x00")
        leading = len(raw) - len(stripped)
        body = self.encode_int(int.from_bytes(stripped, "big")) if stripped else ""
        return self.zero * leading + body

    def decode_bytes(self, text: str, *, error: type[CodecError] = InvalidCharacter) -> bytes:
        leading = len(text) - len(text.lstrip(self.zero))
        n = self.decode_int(text[leading:], error=error)
        body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
        return b"\x00" * leading + body
