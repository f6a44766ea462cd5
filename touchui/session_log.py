"""Append-only event log for UI session initialization.

Goal
- Keep a durable record of every session's script load and entry invocation,
  readable while the server keeps appending.

Design
- JSONL (newline-delimited JSON), one file per session.
- Best-effort atomicity: append a single line, flush, and fsync.
- Readers are tolerant: ignore malformed / partial lines.
- Off by default (TOUCHUI_EVENT_LOG_ENABLED). Files are never rotated or
  deleted here; operators prune the sessions directory themselves.

This module is dependency-light (no Streamlit imports).
"""

from __future__ import annotations

import json
import os
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_sessions_dir() -> Path:
    from touchui.config import EVENT_LOG_DIR

    return Path(EVENT_LOG_DIR)


def _safe_slug(s: str) -> str:
    out = []
    for ch in str(s):
        if ch.isalnum() or ch in {"-", "_"}:
            out.append(ch)
        else:
            out.append("_")
    return "".join(out)


def make_log_path(*, session_id: str, sessions_dir: Path | None = None, create: bool = True) -> Path:
    d = sessions_dir or default_sessions_dir()
    if create:
        d.mkdir(parents=True, exist_ok=True)
    return d / f"session_{_safe_slug(session_id)}.jsonl"


def json_friendly(obj: Any) -> Any:
    """Convert common Python objects into JSON-serializable structures.

    - dataclasses -> dict
    - datetime -> ISO string
    - Path -> string
    - dict/list/tuple -> recursively converted

    Unknown objects are stringified as a last resort.
    """

    if obj is None:
        return None

    if isinstance(obj, (str, int, float, bool)):
        return obj

    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            return obj.replace(tzinfo=timezone.utc).isoformat()
        return obj.astimezone(timezone.utc).isoformat()

    if isinstance(obj, Path):
        return str(obj)

    if hasattr(obj, "__dataclass_fields__"):
        return json_friendly(asdict(obj))

    if isinstance(obj, dict):
        return {str(k): json_friendly(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [json_friendly(v) for v in obj]

    return str(obj)


def append_event(path: Path, event: dict[str, Any]) -> None:
    """Append a single event to a JSONL file.

    Best-effort crash safety:
    - write a single line
    - flush
    - fsync
    """

    if "ts_utc" not in event:
        event = dict(event)
        event["ts_utc"] = _utc_now_iso()

    path.parent.mkdir(parents=True, exist_ok=True)

    line = json.dumps(json_friendly(event), ensure_ascii=False)

    with path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(line)
        f.write("\n")
        f.flush()
        try:
            os.fsync(f.fileno())
        except OSError:
            # Some filesystems do not support fsync.
            pass


def read_events(path: Path, *, max_events: int | None = None) -> list[dict[str, Any]]:
    """Read events from a JSONL file.

    Tolerant reader:
    - Skips blank lines.
    - Ignores lines that aren't valid JSON objects.
    """

    if not path.exists():
        return []

    acc: deque[dict[str, Any]]
    if max_events is None:
        acc = deque()
    else:
        acc = deque(maxlen=int(max_events))

    with path.open("r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(obj, dict):
                continue
            acc.append(obj)

    return list(acc)


@dataclass(frozen=True)
class SessionLogInfo:
    path: Path
    session_id: str


def list_logs(sessions_dir: Path | None = None) -> list[SessionLogInfo]:
    """List available session log files, most recently modified first."""

    d = sessions_dir or default_sessions_dir()
    if not d.exists():
        return []

    paths = sorted(d.glob("session_*.jsonl"), key=lambda p: p.stat().st_mtime, reverse=True)
    return [SessionLogInfo(path=p, session_id=p.stem[len("session_"):]) for p in paths]
