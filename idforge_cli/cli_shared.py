from __future__ import annotations

import contextlib
import json
import os
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator

from dotenv import load_dotenv
from rich.console import Console

from idforge.errors import CodecError, UnsupportedFormat
from idforge.snowflake import MAX_WORKER, TWITTER_EPOCH_MS


class IdforgeCliError(Exception):
    pass


class UsageError(IdforgeCliError):
    pass


class OpError(IdforgeCliError):
    pass


IDFORGE_PRETTY = "IDFORGE_PRETTY"
IDFORGE_TRACE = "IDFORGE_TRACE"
IDFORGE_SNOWFLAKE_EPOCH = "IDFORGE_SNOWFLAKE_EPOCH"
IDFORGE_SNOWFLAKE_WORKER = "IDFORGE_SNOWFLAKE_WORKER"
IDFORGE_NANOID_SIZE = "IDFORGE_NANOID_SIZE"

_ERROR_CONSOLE = Console(stderr=True)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {msg}")


@dataclass(frozen=True)
class GlobalOpts:
    pretty: bool
    trace: bool
    snowflake_epoch_ms: int = TWITTER_EPOCH_MS
    snowflake_worker: int = 1
    nanoid_size: int = 21


def _bootstrap_env() -> None:
    # Discover and load .env without overriding already-exported values.
    load_dotenv()


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def _truthy(raw: str | None) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, *, lo: int, hi: int | None = None) -> int:
    raw = _env_or_none(name)
    if raw is None:
        return default
    try:
        val = int(raw)
    except ValueError as e:
        raise UsageError(f"invalid {name}: expected an integer, got {raw!r}") from e
    if val < lo or (hi is not None and val > hi):
        bound = f"{lo}-{hi}" if hi is not None else f">= {lo}"
        raise UsageError(f"invalid {name}: {val} is outside {bound}")
    return val


def _resolve_global_opts(*, pretty: bool = False, trace: bool = False) -> GlobalOpts:
    return GlobalOpts(
        pretty=pretty or _truthy(os.environ.get(IDFORGE_PRETTY)),
        trace=trace or _truthy(os.environ.get(IDFORGE_TRACE)),
        snowflake_epoch_ms=_env_int(IDFORGE_SNOWFLAKE_EPOCH, TWITTER_EPOCH_MS, lo=0),
        snowflake_worker=_env_int(IDFORGE_SNOWFLAKE_WORKER, 1, lo=0, hi=MAX_WORKER),
        nanoid_size=_env_int(IDFORGE_NANOID_SIZE, 21, lo=1, hi=256),
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _print_json(obj: Any, *, pretty: bool) -> None:
    if pretty:
        sys.stdout.write(json.dumps(obj, indent=2, sort_keys=True) + "\n")
    else:
        sys.stdout.write(json.dumps(obj, separators=(",", ":"), sort_keys=True) + "\n")


@contextlib.contextmanager
def _wide_event(g: GlobalOpts, *, command: str, fmt: str = "") -> Iterator[dict[str, Any]]:
    """Map library errors to CLI errors and emit one JSON event line on stderr when tracing."""
    start = time.time()
    wide_event: dict[str, Any] = {
        "event": "idforge_command",
        "ts": _now_iso(),
        "command": command,
        "format": fmt,
    }
    try:
        yield wide_event
        wide_event["outcome"] = "success"
    except UsageError as exc:
        wide_event["outcome"] = "usage_error"
        wide_event["error"] = {"type": type(exc).__name__, "message": str(exc)}
        raise
    except UnsupportedFormat as exc:
        wide_event["outcome"] = "usage_error"
        wide_event["error"] = {"type": type(exc).__name__, "message": str(exc)}
        raise UsageError(str(exc)) from exc
    except CodecError as exc:
        wide_event["outcome"] = "codec_error"
        wide_event["error"] = {"type": type(exc).__name__, "code": exc.code, "message": str(exc)}
        raise OpError(f"{exc.code}: {exc}") from exc
    except ValueError as exc:
        wide_event["outcome"] = "usage_error"
        wide_event["error"] = {"type": type(exc).__name__, "message": str(exc)}
        raise UsageError(str(exc)) from exc
    finally:
        wide_event["duration_ms"] = int((time.time() - start) * 1000)
        if g.trace:
            sys.stderr.write(json.dumps(wide_event, separators=(",", ":"), sort_keys=True) + "\n")
