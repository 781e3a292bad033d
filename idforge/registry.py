"""Tag -> implementation tables for byte codecs and identifier formats.

Call sites look a format up by tag once and then use its ``encode``/``decode``
or ``generate``/``parse`` capability, instead of branching on mode strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from . import bytecodec, checked, ksuid, nanoid, snowflake, ulid, uuids
from .bech32 import Bech32Variant, bech32_decode, bech32_encode, from_words, to_words
from .errors import InvalidChecksum, Result, UnsupportedFormat, capture

MAX_BATCH = 100
DEFAULT_HRP = "bc"


@dataclass(frozen=True)
class ByteCodecSpec:
    tag: str
    description: str
    encode: Callable[..., str]
    decode: Callable[..., bytes]


@dataclass(frozen=True)
class IdentifierSpec:
    tag: str
    description: str
    generate: Callable[..., str]
    parse: Callable[..., Any]


def _bech32_codec(variant: Bech32Variant) -> ByteCodecSpec:
    def _encode(data: bytes, *, hrp: str = DEFAULT_HRP) -> str:
        return bech32_encode(hrp, to_words(data), variant)

    def _decode(text: str) -> bytes:
        return from_words(bech32_decode(text, variant).words)

    return ByteCodecSpec(variant.value, f"{variant.value} with human-readable prefix", _encode, _decode)


def _checked_decode(text: str) -> bytes:
    out = checked.decode_checked(text)
    if not out.valid:
        raise InvalidChecksum("Base58Check checksum mismatch")
    return out.payload


def _base64url_decode(text: str) -> bytes:
    return bytecodec.decode_base64(text, url_safe=True)


def _base64url_encode(data: bytes, *, wrap: bool = False) -> str:
    return bytecodec.encode_base64(data, url_safe=True, wrap=wrap)


CODECS: dict[str, ByteCodecSpec] = {
    codec.tag: codec
    for codec in (
        ByteCodecSpec("hex", "base16, lowercase by default", bytecodec.encode_hex, bytecodec.decode_hex),
        ByteCodecSpec("binary", "8 bits per byte", bytecodec.encode_binary, bytecodec.decode_binary),
        ByteCodecSpec("base64", "RFC 4648 standard alphabet", bytecodec.encode_base64, bytecodec.decode_base64),
        ByteCodecSpec("base64url", "RFC 4648 URL-safe alphabet, unpadded", _base64url_encode, _base64url_decode),
        ByteCodecSpec("base32", "RFC 4648 base32", bytecodec.encode_base32, bytecodec.decode_base32),
        ByteCodecSpec("base58", "Bitcoin alphabet", bytecodec.encode_base58, bytecodec.decode_base58),
        ByteCodecSpec("base58check", "Base58 with double-SHA256 checksum", checked.encode_checked, _checked_decode),
        _bech32_codec(Bech32Variant.BECH32),
        _bech32_codec(Bech32Variant.BECH32M),
    )
}


def _uuid_generate(
    *,
    version: int = 4,
    uppercase: bool = False,
    dashes: bool = True,
    braces: bool = False,
    **kwargs: Any,
) -> str:
    value = uuids.generate_uuid(version, **kwargs)
    return uuids.format_uuid(value, uppercase=uppercase, dashes=dashes, braces=braces)


def _snowflake_generate(**kwargs: Any) -> str:
    return str(snowflake.generate_snowflake(**kwargs))


IDENTIFIERS: dict[str, IdentifierSpec] = {
    ident.tag: ident
    for ident in (
        IdentifierSpec("uuid", "RFC 4122/9562 UUID v1, v3, v4, v5, v6, v7", _uuid_generate, uuids.parse_uuid),
        IdentifierSpec("ulid", "48-bit ms timestamp + 80 random bits, Crockford base32", ulid.generate_ulid, ulid.decode_ulid),
        IdentifierSpec("ksuid", "32-bit seconds + 128 random bits, base62", ksuid.generate_ksuid, ksuid.parse_ksuid),
        IdentifierSpec("snowflake", "41-bit ms | 10-bit worker | 12-bit sequence", _snowflake_generate, snowflake.parse_snowflake),
        IdentifierSpec("nanoid", "uniform random string over an alphabet", nanoid.generate_nanoid, nanoid.parse_nanoid),
    )
}


def get_codec(tag: str) -> ByteCodecSpec:
    codec = CODECS.get(str(tag or "").strip().lower())
    if codec is None:
        raise UnsupportedFormat(f"unknown codec {tag!r} (expected one of {', '.join(CODECS)})")
    return codec


def get_identifier(tag: str) -> IdentifierSpec:
    ident = IDENTIFIERS.get(str(tag or "").strip().lower())
    if ident is None:
        raise UnsupportedFormat(f"unknown identifier format {tag!r} (expected one of {', '.join(IDENTIFIERS)})")
    return ident


def try_decode(tag: str, text: str, **options: Any) -> Result:
    try:
        codec = get_codec(tag)
    except UnsupportedFormat as e:
        return Result(error=e)
    return capture(codec.decode, text, **options)


def try_parse(tag: str, text: str, **options: Any) -> Result:
    try:
        ident = get_identifier(tag)
    except UnsupportedFormat as e:
        return Result(error=e)
    return capture(ident.parse, text, **options)


def generate_many(tag: str, count: int = 1, **options: Any) -> list[str]:
    if not 1 <= int(count) <= MAX_BATCH:
        raise ValueError(f"count must be 1-{MAX_BATCH}")
    ident = get_identifier(tag)
    return [ident.generate(**options) for _ in range(int(count))]
