import pytest

from idforge import bytecodec
from idforge.errors import (
    InvalidBase32,
    InvalidBase58,
    InvalidBase64,
    InvalidBinary,
    InvalidHex,
    LengthMismatch,
    LengthNotMultipleOf8,
)


def test_hex_of_utf8_a():
    assert bytecodec.encode_hex(bytecodec.utf8("A")) == "41"
    assert bytecodec.decode_hex("41").decode("utf-8") == "A"


def test_hex_formatting_options():
    assert bytecodec.encode_hex(b"\xab\xcd", uppercase=True) == "ABCD"
    assert bytecodec.encode_hex(b"AB", spaced=True) == "41 42"
    assert bytecodec.encode_hex(b"AB", prefix=True) == "0x4142"
    assert bytecodec.encode_hex(b"AB", spaced=True, prefix=True) == "0x41 0x42"


def test_hex_decode_normalizes_input():
    assert bytecodec.decode_hex("0x41 0x42") == b"AB"
    assert bytecodec.decode_hex("ABcd") == b"\xab\xcd"
    assert bytecodec.decode_hex("abc") == b"\x0a\xbc"
    assert bytecodec.decode_hex("") == b""


def test_hex_decode_rejects_non_hex():
    with pytest.raises(InvalidHex):
        bytecodec.decode_hex("zz")


def test_binary():
    assert bytecodec.encode_binary(b"AB") == "01000001 01000010"
    assert bytecodec.encode_binary(b"A", spaced=False) == "01000001"
    assert bytecodec.decode_binary("0100 0001") == b"A"


def test_binary_errors():
    with pytest.raises(InvalidBinary):
        bytecodec.decode_binary("01000002")
    with pytest.raises(LengthNotMultipleOf8):
        bytecodec.decode_binary("0101")
    with pytest.raises(LengthMismatch):
        bytecodec.decode_binary("0101")


def test_base64_standard_and_url_safe():
    assert bytecodec.encode_base64(b"hello") == "aGVsbG8="
    assert bytecodec.encode_base64(b"\xfb\xff") == "+/8="
    assert bytecodec.encode_base64(b"\xfb\xff", url_safe=True) == "-_8"
    assert bytecodec.decode_base64("-_8", url_safe=True) == b"\xfb\xff"
    assert bytecodec.decode_base64("-_8", url_safe=None) == b"\xfb\xff"
    assert bytecodec.decode_base64("aGVsbG8") == b"hello"


def test_base64_wrap():
    encoded = bytecodec.encode_base64(bytes(range(100)), wrap=True)
    lines = encoded.split("\n")
    assert [len(line) for line in lines] == [76, 60]
    assert bytecodec.decode_base64(encoded) == bytes(range(100))


def test_base64_rejects_bad_input():
    with pytest.raises(InvalidBase64):
        bytecodec.decode_base64("aGV$")
    # Trailing bits of '9' are not zero: not the canonical encoding of any input.
    with pytest.raises(InvalidBase64):
        bytecodec.decode_base64("aGVsbG9=")


def test_base32():
    assert bytecodec.encode_base32(b"hello") == "NBSWY3DP"
    assert bytecodec.decode_base32("nbswy3dp") == b"hello"
    assert bytecodec.decode_base32("MY") == b"f"


def test_base32_rejects_bad_input():
    with pytest.raises(InvalidBase32):
        bytecodec.decode_base32("M1======")
    with pytest.raises(InvalidBase32):
        bytecodec.decode_base32("MZ")


def test_base58_known_value():
    assert bytecodec.encode_base58(b"hello world") == "StV1DL6CwTryKyV"
    assert bytecodec.decode_base58("StV1DL6CwTryKyV") == b"hello world"


def test_base58_keeps_leading_zero_bytes():
    assert bytecodec.encode_base58(b"\x00\x00\x01") == "112"
    assert bytecodec.decode_base58("112") == b"\x00\x00\x01"
    assert bytecodec.encode_base58(b"\x00" * 16) == "1" * 16


def test_base58_rejects_ambiguous_characters():
    for bad in ("0", "O", "I", "l"):
        with pytest.raises(InvalidBase58):
            bytecodec.decode_base58(f"2{bad}")
