from __future__ import annotations

import sys
import uuid
from typing import Any

import click
import typer

from idforge import bigbase, checked, registry
from idforge.bech32 import bech32_decode, bech32_encode, from_words, to_words
from idforge.bytecodec import decode_base64, decode_hex, encode_hex, utf8
from idforge.detect import detect_id
from idforge.ksuid import KsuidInfo
from idforge.providers import digest_fn, iso_from_ms
from idforge.snowflake import SnowflakeInfo
from idforge.ulid import UlidInfo
from idforge.uuids import UuidInfo

from . import __version__
from .cli_shared import (
    GlobalOpts,
    OpError,
    UsageError,
    _bootstrap_env,
    _eprint,
    _print_json,
    _resolve_global_opts,
    _rich_error,
    _wide_event,
)

app = typer.Typer(
    name="idforge",
    help="Encode, decode, generate and inspect binary encodings and identifiers.",
    no_args_is_help=True,
    add_completion=False,
)

_INPUT_ENCODINGS = ("utf8", "hex", "base64")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"idforge {__version__}")
        raise typer.Exit(code=0)


@app.callback()
def app_callback(
    ctx: typer.Context,
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print JSON output"),
    trace: bool = typer.Option(False, "--trace", help="Emit one JSON wide event per command on stderr"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    del version
    ctx.obj = {"g": _resolve_global_opts(pretty=pretty, trace=trace)}


def _ctx_global(ctx: typer.Context) -> GlobalOpts:
    if isinstance(ctx.obj, dict) and isinstance(ctx.obj.get("g"), GlobalOpts):
        return ctx.obj["g"]
    return _resolve_global_opts()


def _input_bytes(text: str, encoding: str) -> bytes:
    enc = str(encoding or "utf8").strip().lower().replace("-", "")
    if enc not in _INPUT_ENCODINGS:
        raise UsageError(f"invalid --input {encoding!r} (expected one of {', '.join(_INPUT_ENCODINGS)})")
    if enc == "hex":
        return decode_hex(text)
    if enc == "base64":
        return decode_base64(text, url_safe=None)
    return utf8(text)


def _bech32_variant(tag: str, variant: str) -> str | None:
    v = str(variant or "").strip().lower()
    if v == "auto":
        return None
    return v or tag


def _utf8_or_none(raw: bytes) -> str | None:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _bytes_payload(raw: bytes) -> dict[str, Any]:
    return {"hex": encode_hex(raw), "length": len(raw), "text": _utf8_or_none(raw)}


def _info_payload(info: Any) -> dict[str, Any]:
    if isinstance(info, UuidInfo):
        out: dict[str, Any] = {
            "uuid": str(info.uuid),
            "version": info.version,
            "variant": info.variant,
        }
        if info.timestamp_ms is not None:
            out["timestampMs"] = info.timestamp_ms
            out["iso"] = iso_from_ms(info.timestamp_ms)
        if info.clock_seq is not None:
            out["clockSeq"] = info.clock_seq
        if info.node is not None:
            out["node"] = f"{info.node:012x}"
        return out
    if isinstance(info, UlidInfo):
        return {
            "ulid": info.ulid,
            "timestampMs": info.timestamp_ms,
            "iso": iso_from_ms(info.timestamp_ms),
            "randomness": encode_hex(info.randomness),
            "uuid": str(uuid.UUID(bytes=info.raw)),
        }
    if isinstance(info, KsuidInfo):
        return {
            "ksuid": info.ksuid,
            "timestamp": info.timestamp,
            "iso": iso_from_ms(info.timestamp * 1000),
            "payload": encode_hex(info.payload),
        }
    if isinstance(info, SnowflakeInfo):
        return {
            "snowflake": str(info.value),
            "timestampMs": info.timestamp_ms,
            "iso": iso_from_ms(info.timestamp_ms),
            "workerId": info.worker_id,
            "sequence": info.sequence,
            "epochMs": info.epoch_ms,
        }
    return {"value": str(info)}


@app.command("formats", help="List codec and identifier format tags.")
def formats(ctx: typer.Context) -> None:
    g = _ctx_global(ctx)
    _print_json(
        {
            "kind": "idforge.formats.v1",
            "codecs": {tag: entry.description for tag, entry in registry.CODECS.items()},
            "identifiers": {tag: entry.description for tag, entry in registry.IDENTIFIERS.items()},
        },
        pretty=g.pretty,
    )


@app.command("encode", help="Encode text (or hex/base64 input bytes) with a codec.")
def encode(
    ctx: typer.Context,
    fmt: str = typer.Argument(..., metavar="FORMAT", help="Codec tag (see `idforge formats`)"),
    text: str = typer.Argument(..., help="Input to encode"),
    input_encoding: str = typer.Option("utf8", "--input", help="How to read TEXT: utf8, hex or base64"),
    uppercase: bool = typer.Option(False, "--uppercase", help="hex: uppercase digits"),
    spaced: bool = typer.Option(False, "--spaced", help="hex/binary: separate bytes with spaces"),
    prefix: bool = typer.Option(False, "--prefix", help="hex: add 0x (per byte when --spaced)"),
    wrap: bool = typer.Option(False, "--wrap", help="base64: wrap lines at 76 characters"),
    hrp: str = typer.Option(registry.DEFAULT_HRP, "--hrp", help="bech32/bech32m: human-readable prefix"),
    variant: str = typer.Option("", "--variant", help="bech32/bech32m: override the checksum variant"),
    digest: str = typer.Option("sha256", "--digest", help="base58check: digest algorithm"),
) -> None:
    g = _ctx_global(ctx)
    tag = str(fmt or "").strip().lower()
    with _wide_event(g, command="encode", fmt=tag):
        codec = registry.get_codec(tag)
        data = _input_bytes(text, input_encoding)
        if tag == "hex":
            encoded = codec.encode(data, uppercase=uppercase, spaced=spaced, prefix=prefix)
        elif tag == "binary":
            encoded = codec.encode(data, spaced=spaced)
        elif tag in ("base64", "base64url"):
            encoded = codec.encode(data, wrap=wrap)
        elif tag in ("bech32", "bech32m"):
            encoded = bech32_encode(hrp, to_words(data), variant or tag)
        elif tag == "base58check":
            encoded = checked.encode_checked(data, digest_fn(digest))
        else:
            encoded = codec.encode(data)
    _print_json({"kind": "idforge.encode.v1", "format": tag, "encoded": encoded}, pretty=g.pretty)


@app.command("decode", help="Decode text with a codec and show the bytes.")
def decode(
    ctx: typer.Context,
    fmt: str = typer.Argument(..., metavar="FORMAT", help="Codec tag (see `idforge formats`)"),
    text: str = typer.Argument(..., help="Encoded text"),
    digest: str = typer.Option("sha256", "--digest", help="base58check: digest algorithm"),
    variant: str = typer.Option("", "--variant", help="bech32/bech32m: bech32, bech32m or auto"),
) -> None:
    g = _ctx_global(ctx)
    tag = str(fmt or "").strip().lower()
    out: dict[str, Any] = {"kind": "idforge.decode.v1", "format": tag}
    with _wide_event(g, command="decode", fmt=tag):
        codec = registry.get_codec(tag)
        if tag == "base58check":
            result = checked.decode_checked(text, digest_fn(digest))
            out.update(_bytes_payload(result.payload))
            out["valid"] = result.valid
            out["checksum"] = encode_hex(result.checksum)
        elif tag in ("bech32", "bech32m"):
            parts = bech32_decode(text, _bech32_variant(tag, variant))
            out.update(_bytes_payload(from_words(parts.words)))
            out["hrp"] = parts.hrp
            out["words"] = list(parts.words)
            out["variant"] = parts.variant.value
        else:
            out.update(_bytes_payload(codec.decode(text)))
    _print_json(out, pretty=g.pretty)


@app.command("base-convert", help="Convert an unsigned integer between bases 2-36.")
def base_convert(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="Digits to convert (0x/0b/0o prefixes accepted)"),
    from_base: int = typer.Option(10, "--from", help="Base of VALUE"),
    to_base: int = typer.Option(0, "--to", help="Target base; omit for binary/octal/decimal/hex"),
) -> None:
    g = _ctx_global(ctx)
    out: dict[str, Any] = {"kind": "idforge.base-convert.v1", "fromBase": from_base}
    with _wide_event(g, command="base-convert"):
        if to_base:
            out["toBase"] = to_base
            out["value"] = bigbase.convert_base(value, from_base, to_base)
        else:
            out["bases"] = bigbase.number_bases(value, from_base)
    _print_json(out, pretty=g.pretty)


@app.command("generate", help="Generate one or more identifiers.")
def generate(
    ctx: typer.Context,
    fmt: str = typer.Argument(..., metavar="FORMAT", help="uuid, ulid, ksuid, snowflake or nanoid"),
    count: int = typer.Option(1, "--count", help=f"How many ids (1-{registry.MAX_BATCH})"),
    uuid_version: int = typer.Option(4, "--uuid-version", help="uuid: 1, 3, 4, 5, 6 or 7"),
    namespace: str = typer.Option("dns", "--namespace", help="uuid v3/v5: dns, url, oid, x500 or a UUID"),
    name: str = typer.Option("", "--name", help="uuid v3/v5: name to hash"),
    uppercase: bool = typer.Option(False, "--uppercase", help="uuid: uppercase hex"),
    no_dashes: bool = typer.Option(False, "--no-dashes", help="uuid: strip dashes"),
    braces: bool = typer.Option(False, "--braces", help="uuid: wrap in {}"),
    lowercase: bool = typer.Option(False, "--lowercase", help="ulid: lowercase output"),
    size: int | None = typer.Option(None, "--size", help="nanoid: length"),
    alphabet: str = typer.Option("default", "--alphabet", help="nanoid: alphabet name or literal symbols"),
    worker: int | None = typer.Option(None, "--worker", help="snowflake: worker id 0-1023"),
    epoch: int | None = typer.Option(None, "--epoch", help="snowflake: epoch in Unix ms"),
) -> None:
    g = _ctx_global(ctx)
    tag = str(fmt or "").strip().lower()
    with _wide_event(g, command="generate", fmt=tag) as wide_event:
        options: dict[str, Any] = {}
        if tag == "uuid":
            options = {
                "version": uuid_version,
                "uppercase": uppercase,
                "dashes": not no_dashes,
                "braces": braces,
            }
            if uuid_version in (3, 5):
                options["namespace"] = namespace
                options["name"] = name
        elif tag == "ulid":
            options = {"lowercase": lowercase}
        elif tag == "snowflake":
            options = {
                "worker_id": g.snowflake_worker if worker is None else worker,
                "epoch_ms": g.snowflake_epoch_ms if epoch is None else epoch,
            }
        elif tag == "nanoid":
            options = {"size": g.nanoid_size if size is None else size, "alphabet": alphabet}
        ids = registry.generate_many(tag, count, **options)
        wide_event["count"] = len(ids)
    if tag == "snowflake" and count > 1:
        _eprint("warning: snowflake sequences are random; ids from the same millisecond may collide")
    _print_json({"kind": "idforge.generate.v1", "format": tag, "ids": ids}, pretty=g.pretty)


@app.command("inspect", help="Parse an identifier and show its fields.")
def inspect(
    ctx: typer.Context,
    fmt: str = typer.Argument(..., metavar="FORMAT", help="uuid, ulid, ksuid, snowflake or nanoid"),
    text: str = typer.Argument(..., help="Identifier text"),
    epoch: int | None = typer.Option(None, "--epoch", help="snowflake: epoch in Unix ms"),
    alphabet: str = typer.Option("default", "--alphabet", help="nanoid: alphabet name or literal symbols"),
) -> None:
    g = _ctx_global(ctx)
    tag = str(fmt or "").strip().lower()
    with _wide_event(g, command="inspect", fmt=tag):
        ident = registry.get_identifier(tag)
        if tag == "snowflake":
            info = ident.parse(text, epoch_ms=g.snowflake_epoch_ms if epoch is None else epoch)
        elif tag == "nanoid":
            info = ident.parse(text, alphabet)
        else:
            info = ident.parse(text)
    _print_json({"kind": "idforge.inspect.v1", "format": tag, **_info_payload(info)}, pretty=g.pretty)


@app.command("detect", help="Guess which identifier formats a string matches.")
def detect(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Identifier text"),
) -> None:
    g = _ctx_global(ctx)
    with _wide_event(g, command="detect"):
        matches = detect_id(text)
    _print_json({"kind": "idforge.detect.v1", "matches": matches}, pretty=g.pretty)


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        _bootstrap_env()
        result = app(args=argv, prog_name="idforge", standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except click.ClickException as e:
        _rich_error(e.format_message())
        return int(e.exit_code)
    except UsageError as e:
        _rich_error(str(e))
        return 2
    except OpError as e:
        _rich_error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
