from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class CodecError(ValueError):
    code = "codec_error"


class EmptyInput(CodecError):
    code = "empty_input"


class InvalidCharacter(CodecError):
    code = "invalid_character"


class InvalidDigit(InvalidCharacter):
    code = "invalid_digit"


class InvalidHex(InvalidCharacter):
    code = "invalid_hex"


class InvalidBinary(InvalidCharacter):
    code = "invalid_binary"


class InvalidBase64(InvalidCharacter):
    code = "invalid_base64"


class InvalidBase32(InvalidCharacter):
    code = "invalid_base32"


class InvalidBase58(InvalidCharacter):
    code = "invalid_base58"


class MixedCase(InvalidCharacter):
    code = "mixed_case"


class LengthMismatch(CodecError):
    code = "length_mismatch"


class InvalidLength(LengthMismatch):
    code = "invalid_length"


class LengthNotMultipleOf8(LengthMismatch):
    code = "length_not_multiple_of_8"


class TooShort(LengthMismatch):
    code = "too_short"


class InvalidChecksum(CodecError):
    code = "invalid_checksum"


class InvalidHrp(CodecError):
    code = "invalid_hrp"


class InvalidVersion(CodecError):
    code = "invalid_version"


class UnsupportedBase(CodecError):
    code = "unsupported_base"


class UnsupportedFormat(CodecError):
    code = "unsupported_format"


class UnsupportedDigest(CodecError):
    code = "unsupported_digest"


@dataclass(frozen=True)
class Result:
    """Tagged outcome of a decode/parse call.

    Exactly one of ``value`` and ``error`` is meaningful: ``ok`` tells which.
    """

    value: Any = None
    error: CodecError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> str:
        return self.error.code if self.error is not None else "ok"

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


def capture(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result:
    try:
        return Result(value=fn(*args, **kwargs))
    except CodecError as e:
        return Result(error=e)
