from __future__ import annotations

import json

from typer.testing import CliRunner

import idforge_cli.main as cli
from idforge.uuids import parse_uuid
from idforge.snowflake import parse_snowflake


runner = CliRunner()


def _invoke(args: list[str]) -> dict:
    result = runner.invoke(cli.app, args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_encode_hex() -> None:
    parsed = _invoke(["encode", "hex", "A"])
    assert parsed == {"kind": "idforge.encode.v1", "format": "hex", "encoded": "41"}


def test_encode_reads_hex_input() -> None:
    parsed = _invoke(["encode", "base58", "000001", "--input", "hex"])
    assert parsed["encoded"] == "112"


def test_encode_bech32_with_hrp_and_variant() -> None:
    parsed = _invoke(["encode", "bech32", "hi", "--hrp", "tb", "--variant", "bech32m"])
    assert parsed["encoded"].startswith("tb1")
    decoded = _invoke(["decode", "bech32m", parsed["encoded"]])
    assert decoded["hrp"] == "tb"
    assert decoded["text"] == "hi"
    assert decoded["variant"] == "bech32m"


def test_decode_hex() -> None:
    parsed = _invoke(["decode", "hex", "41"])
    assert parsed["kind"] == "idforge.decode.v1"
    assert parsed["hex"] == "41"
    assert parsed["text"] == "A"
    assert parsed["length"] == 1


def test_decode_non_utf8_text_is_null() -> None:
    parsed = _invoke(["decode", "base64", "//8="])
    assert parsed["hex"] == "ffff"
    assert parsed["text"] is None


def test_decode_bech32_autodetect() -> None:
    parsed = _invoke(["decode", "bech32", "a1lqfn3a", "--variant", "auto"])
    assert parsed["hrp"] == "a"
    assert parsed["words"] == []
    assert parsed["variant"] == "bech32m"


def test_decode_base58check_reports_validity() -> None:
    encoded = _invoke(["encode", "base58check", "000102", "--input", "hex"])["encoded"]
    parsed = _invoke(["decode", "base58check", encoded])
    assert parsed["valid"] is True
    assert parsed["hex"] == "000102"
    assert len(parsed["checksum"]) == 8


def test_base_convert() -> None:
    parsed = _invoke(["base-convert", "ff", "--from", "16"])
    assert parsed["bases"]["decimal"] == "255"
    assert parsed["bases"]["binary"] == "11111111"
    parsed = _invoke(["base-convert", "255", "--to", "36"])
    assert parsed["value"] == "73"


def test_generate_uuid7() -> None:
    parsed = _invoke(["generate", "uuid", "--uuid-version", "7", "--count", "3"])
    assert parsed["kind"] == "idforge.generate.v1"
    assert len(parsed["ids"]) == 3
    assert all(parse_uuid(v).version == 7 for v in parsed["ids"])


def test_generate_uuid5_is_stable() -> None:
    args = ["generate", "uuid", "--uuid-version", "5", "--namespace", "url", "--name", "https://example.com"]
    assert _invoke(args)["ids"] == _invoke(args)["ids"]


def test_generate_nanoid_size_from_env(monkeypatch) -> None:
    monkeypatch.setenv("IDFORGE_NANOID_SIZE", "8")
    parsed = _invoke(["generate", "nanoid", "--alphabet", "numbers"])
    (value,) = parsed["ids"]
    assert len(value) == 8 and value.isdigit()


def test_generate_snowflake_worker_from_env(monkeypatch) -> None:
    monkeypatch.setenv("IDFORGE_SNOWFLAKE_WORKER", "42")
    parsed = _invoke(["generate", "snowflake"])
    assert parse_snowflake(parsed["ids"][0]).worker_id == 42
    parsed = _invoke(["generate", "snowflake", "--worker", "7"])
    assert parse_snowflake(parsed["ids"][0]).worker_id == 7


def test_inspect_snowflake() -> None:
    parsed = _invoke(["inspect", "snowflake", "4194324487", "--epoch", "0"])
    assert parsed["kind"] == "idforge.inspect.v1"
    assert parsed["workerId"] == 5
    assert parsed["sequence"] == 7
    assert parsed["timestampMs"] == 1000
    assert parsed["iso"] == "1970-01-01T00:00:01.000Z"


def test_inspect_ulid() -> None:
    parsed = _invoke(["inspect", "ulid", "01ARYZ6S41TSV4RRFFQ69G5FAV"])
    assert parsed["timestampMs"] == 1469918176385
    assert len(parsed["randomness"]) == 20


def test_inspect_uuid_v1() -> None:
    parsed = _invoke(["inspect", "uuid", "6ba7b810-9dad-11d1-80b4-00c04fd430c8"])
    assert parsed["version"] == 1
    assert parsed["variant"] == "RFC4122"
    assert parsed["node"] == "00c04fd430c8"
    assert parsed["iso"].startswith("1998-02-04")


def test_detect() -> None:
    parsed = _invoke(["detect", "01ARYZ6S41TSV4RRFFQ69G5FAV"])
    assert "ULID (valid format)" in parsed["matches"]


def test_formats() -> None:
    parsed = _invoke(["formats"])
    assert "base58check" in parsed["codecs"]
    assert "snowflake" in parsed["identifiers"]


def test_pretty_output() -> None:
    result = runner.invoke(cli.app, ["--pretty", "encode", "hex", "A"])
    assert result.exit_code == 0
    assert result.stdout.startswith("{\n  ")


def test_main_codec_error_exit_code(capsys) -> None:
    assert cli.main(["decode", "hex", "zz"]) == 1
    assert "invalid_hex" in capsys.readouterr().err


def test_main_unknown_format_is_usage_error(capsys) -> None:
    assert cli.main(["encode", "base85", "x"]) == 2
    assert "base85" in capsys.readouterr().err


def test_main_bad_worker_is_usage_error() -> None:
    assert cli.main(["generate", "snowflake", "--worker", "5000"]) == 2


def test_main_bad_env_is_usage_error(monkeypatch, capsys) -> None:
    monkeypatch.setenv("IDFORGE_SNOWFLAKE_WORKER", "many")
    assert cli.main(["detect", "x"]) == 2
    assert "IDFORGE_SNOWFLAKE_WORKER" in capsys.readouterr().err


def test_main_version(capsys) -> None:
    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == "idforge 0.1.0"


def test_main_trace_emits_one_wide_event(capsys) -> None:
    assert cli.main(["--trace", "encode", "hex", "A"]) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out)["encoded"] == "41"
    lines = [line for line in captured.err.splitlines() if line.strip()]
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["event"] == "idforge_command"
    assert event["command"] == "encode"
    assert event["format"] == "hex"
    assert event["outcome"] == "success"
    assert "duration_ms" in event


def test_main_trace_records_codec_error(capsys) -> None:
    assert cli.main(["--trace", "decode", "base58", "0OIl"]) == 1
    err_lines = capsys.readouterr().err.splitlines()
    event = json.loads(next(line for line in err_lines if line.startswith("{")))
    assert event["outcome"] == "codec_error"
    assert event["error"]["code"] == "invalid_base58"
