from __future__ import annotations

import re

from .ksuid import is_ksuid
from .snowflake import parse_snowflake
from .ulid import is_ulid
from .uuids import parse_uuid

_NANOID_RE = re.compile(r"^[A-Za-z0-9_-]{10,64}$")


def detect_id(text: str) -> list[str]:
    """Name every identifier format ``text`` is valid for, or plausibly is."""
    value = str(text or "").strip()
    if not value:
        return []
    found: list[str] = []
    try:
        info = parse_uuid(value)
        found.append(f"UUID v{info.version} (valid)")
    except ValueError:
        pass
    if is_ulid(value):
        found.append("ULID (valid format)")
    if is_ksuid(value):
        found.append("KSUID (possible)")
    if value.isdigit():
        try:
            parse_snowflake(value)
            found.append("Snowflake (possible)")
        except ValueError:
            pass
    if _NANOID_RE.match(value):
        found.append("NanoID / random string (possible)")
    return found or ["Unknown / unsupported format"]
