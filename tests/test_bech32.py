import pytest

from idforge.bech32 import Bech32Variant, bech32_decode, bech32_encode, from_words, to_words
from idforge.errors import InvalidCharacter, InvalidChecksum, InvalidHrp, LengthMismatch, MixedCase


@pytest.mark.parametrize(
    "text",
    [
        "A12UEL5L",
        "a12uel5l",
        "an83characterlonghumanreadablepartthatcontainsthenumber1andtheexcludedcharactersbio1tt5tgs",
        "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw",
        "split1checkupstagehandshakeupstreamerranterredcaperred2y9e3w",
    ],
)
def test_bip173_valid_strings(text):
    decoded = bech32_decode(text, Bech32Variant.BECH32)
    assert decoded.variant is Bech32Variant.BECH32
    assert bech32_encode(decoded.hrp, decoded.words) == text.lower()


@pytest.mark.parametrize("text", ["A1LQFN3A", "a1lqfn3a", "abcdef1l7aum6echk45nj3s0wdvt2fg8x9yrzpqzd3ryx"])
def test_bip350_valid_strings(text):
    decoded = bech32_decode(text, "bech32m")
    assert decoded.variant is Bech32Variant.BECH32M
    assert bech32_encode(decoded.hrp, decoded.words, "bech32m") == text.lower()


def test_words_of_charset_string():
    decoded = bech32_decode("abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw")
    assert decoded.hrp == "abcdef"
    assert decoded.words == tuple(range(32))


def test_variant_autodetect_and_mismatch():
    assert bech32_decode("a1lqfn3a").variant is Bech32Variant.BECH32M
    assert bech32_decode("a12uel5l").variant is Bech32Variant.BECH32
    with pytest.raises(InvalidChecksum):
        bech32_decode("a1lqfn3a", Bech32Variant.BECH32)


def test_hrp_and_words_survive_encode_decode():
    words = to_words(b"\x00\x14\x75\x1e\x76\xe8\x19\x91\x96")
    decoded = bech32_decode(bech32_encode("bc", words))
    assert decoded.hrp == "bc"
    assert list(decoded.words) == words


def test_hrp_is_lowercased_on_encode():
    assert bech32_encode("BC", [0]).startswith("bc1")


def test_mixed_case_rejected():
    with pytest.raises(MixedCase):
        bech32_decode("A12uEL5L")


def test_checksum_mismatch():
    with pytest.raises(InvalidChecksum):
        bech32_decode("A1G7SGD8")
    with pytest.raises(InvalidChecksum):
        bech32_decode("a12uel5m")


@pytest.mark.parametrize("text", ["1pzry9x8gf2tvdw0s3jn54khce6mua7l", "pzry9x8gf2tvdw0s3jn54khce6mua7l"])
def test_missing_hrp_or_separator(text):
    with pytest.raises(InvalidHrp):
        bech32_decode(text)


def test_invalid_data_character():
    with pytest.raises(InvalidCharacter):
        bech32_decode("x1b4n0q5v")


def test_length_limits():
    with pytest.raises(LengthMismatch):
        bech32_decode("li1dgmt3")
    with pytest.raises(LengthMismatch):
        bech32_encode("bc", [0] * 90)


def test_word_conversion():
    assert to_words(b"") == []
    assert to_words(b"\xff") == [31, 28]
    assert from_words([31, 28]) == b"\xff"
    with pytest.raises(LengthMismatch):
        from_words([31, 29])
