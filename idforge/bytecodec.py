"""Byte string <-> text encodings: hex, binary, Base64/Base64URL, Base32, Base58.

Every decoder either returns the complete byte string or raises a
:class:`~idforge.errors.CodecError` subclass; nothing is silently truncated.
"""

from __future__ import annotations

import base64
import binascii
import re

from .alphabet import BASE58_BITCOIN, Alphabet
from .errors import InvalidBase32, InvalidBase58, InvalidBase64, InvalidBinary, InvalidHex, LengthNotMultipleOf8

BASE64_LINE_LENGTH = 76

_WS_RE = re.compile(r"\s+")
_HEX_PREFIX_RE = re.compile(r"0x", re.IGNORECASE)
_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")
_BINARY_RE = re.compile(r"^[01]*$")
_URLSAFE_RE = re.compile(r"[-_]")

BASE58 = Alphabet(BASE58_BITCOIN)


def utf8(text: str) -> bytes:
    return str(text).encode("utf-8")


def encode_hex(data: bytes, *, uppercase: bool = False, spaced: bool = False, prefix: bool = False) -> str:
    pairs = [f"{b:02x}" for b in bytes(data)]
    if uppercase:
        pairs = [p.upper() for p in pairs]
    if spaced:
        return " ".join(f"0x{p}" if prefix else p for p in pairs)
    joined = "".join(pairs)
    return f"0x{joined}" if prefix else joined


def decode_hex(text: str) -> bytes:
    clean = _WS_RE.sub("", _HEX_PREFIX_RE.sub("", str(text or "")))
    if not _HEX_RE.match(clean):
        raise InvalidHex("invalid hex string")
    if len(clean) % 2:
        clean = f"0{clean}"
    return bytes.fromhex(clean)


def encode_binary(data: bytes, *, spaced: bool = True) -> str:
    bits = [f"{b:08b}" for b in bytes(data)]
    return " ".join(bits) if spaced else "".join(bits)


def decode_binary(text: str) -> bytes:
    clean = _WS_RE.sub("", str(text or ""))
    if not _BINARY_RE.match(clean):
        raise InvalidBinary("binary input must use 0 or 1 only")
    if len(clean) % 8:
        raise LengthNotMultipleOf8(f"binary input has {len(clean)} bits (must be a multiple of 8)")
    return bytes(int(clean[i : i + 8], 2) for i in range(0, len(clean), 8))


def wrap_lines(text: str, width: int = BASE64_LINE_LENGTH) -> str:
    if not text:
        return text
    return "\n".join(text[i : i + width] for i in range(0, len(text), width))


def encode_base64(data: bytes, *, url_safe: bool = False, wrap: bool = False) -> str:
    if url_safe:
        encoded = base64.urlsafe_b64encode(bytes(data)).decode("ascii").rstrip("=")
    else:
        encoded = base64.b64encode(bytes(data)).decode("ascii")
    return wrap_lines(encoded) if wrap else encoded


def normalize_base64(text: str, *, url_safe: bool) -> str:
    normalized = _WS_RE.sub("", str(text or ""))
    if url_safe:
        normalized = normalized.replace("-", "+").replace("_", "/")
    return normalized + "=" * (-len(normalized) % 4)


def decode_base64(text: str, *, url_safe: bool | None = False) -> bytes:
    """Decode standard or URL-safe Base64.

    ``url_safe=None`` picks the URL-safe alphabet when the input contains
    ``-`` or ``_``. Padding may be omitted. Input whose trailing bits are not
    zero is rejected because it would not re-encode to the same text.
    """
    if url_safe is None:
        url_safe = bool(_URLSAFE_RE.search(str(text or "")))
    normalized = normalize_base64(text, url_safe=url_safe)
    try:
        raw = base64.b64decode(normalized.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidBase64(f"invalid Base64{'URL' if url_safe else ''} string: {e}") from e
    if base64.b64encode(raw).decode("ascii") != normalized:
        raise InvalidBase64("invalid Base64 string: non-canonical padding bits")
    return raw


def encode_base32(data: bytes) -> str:
    return base64.b32encode(bytes(data)).decode("ascii")


def decode_base32(text: str) -> bytes:
    normalized = _WS_RE.sub("", str(text or "")).upper()
    normalized += "=" * (-len(normalized) % 8)
    try:
        raw = base64.b32decode(normalized.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidBase32(f"invalid Base32 string: {e}") from e
    if base64.b32encode(raw).decode("ascii") != normalized:
        raise InvalidBase32("invalid Base32 string: non-canonical padding bits")
    return raw


def encode_base58(data: bytes) -> str:
    return BASE58.encode_bytes(bytes(data))


def decode_base58(text: str) -> bytes:
    return BASE58.decode_bytes(str(text or "").strip(), error=InvalidBase58)
