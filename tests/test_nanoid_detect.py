import uuid

import pytest

from idforge import nanoid
from idforge.detect import detect_id
from idforge.errors import EmptyInput, InvalidCharacter, InvalidLength
from idforge.providers import seeded_random
from idforge.ulid import encode_ulid


def test_default_nanoid_shape():
    value = nanoid.generate_nanoid()
    assert len(value) == nanoid.DEFAULT_SIZE
    assert set(value) <= set(nanoid.DEFAULT_ALPHABET)


@pytest.mark.parametrize("alphabet,symbols", [("numbers", "0123456789"), ("hex", "0123456789abcdef"), ("xyz", "xyz")])
def test_alphabet_membership(alphabet, symbols):
    value = nanoid.generate_nanoid(64, alphabet)
    assert len(value) == 64
    assert set(value) <= set(symbols)


def test_seeded_nanoid_is_deterministic():
    assert nanoid.generate_nanoid(random_source=seeded_random(11)) == nanoid.generate_nanoid(
        random_source=seeded_random(11)
    )


def test_all_symbols_reachable():
    value = nanoid.generate_nanoid(2000, "abc", random_source=seeded_random(2))
    assert set(value) == {"a", "b", "c"}


def test_generate_rejects_bad_arguments():
    with pytest.raises(ValueError):
        nanoid.generate_nanoid(0)
    with pytest.raises(ValueError):
        nanoid.generate_nanoid(5, "aab")
    with pytest.raises(ValueError):
        nanoid.generate_nanoid(5, "a")


def test_parse_nanoid():
    assert nanoid.parse_nanoid("abc_-", size=5) == "abc_-"
    with pytest.raises(EmptyInput):
        nanoid.parse_nanoid("")
    with pytest.raises(InvalidCharacter):
        nanoid.parse_nanoid("abc!")
    with pytest.raises(InvalidLength):
        nanoid.parse_nanoid("abc", size=4)


def test_detect_uuid():
    assert "UUID v4 (valid)" in detect_id(str(uuid.uuid4()))


def test_detect_ulid():
    assert "ULID (valid format)" in detect_id(encode_ulid(1000, bytes(10)))


def test_detect_ksuid_and_snowflake():
    assert "KSUID (possible)" in detect_id("0ujtsYcgvSTl8PAuAdqWYSMnLOv")
    assert "Snowflake (possible)" in detect_id("1541815603606036480")


def test_detect_nothing():
    assert detect_id("") == []
    assert detect_id("!!") == ["Unknown / unsupported format"]
