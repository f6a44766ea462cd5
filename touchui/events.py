"""Contracts for session initialization events.

All events are appended to the per-session JSONL log (see touchui.session_log).

Event Types:
- SessionStartEvent: A new UI session is being initialized
- ScriptLoadedEvent: Script resource loaded and entry function resolved
- ScriptLoadFailedEvent: Script resource could not be loaded
- EntryInvokedEvent: Entry function returned
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from touchui.session_log import append_event as _append_event_raw

logger = logging.getLogger(__name__)


@dataclass
class SessionStartEvent:
    session_id: str
    script_name: str
    entry_function: str
    load_mode: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "session_start", **asdict(self)}


@dataclass
class ScriptLoadedEvent:
    session_id: str
    script_name: str
    entry_function: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "script_loaded", **asdict(self)}


@dataclass
class ScriptLoadFailedEvent:
    session_id: str
    script_name: str
    error: str
    traceback: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": "script_load_failed", **asdict(self)}


@dataclass
class EntryInvokedEvent:
    session_id: str
    script_name: str
    entry_function: str
    duration_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {"type": "entry_invoked", **asdict(self)}


def append_event(path: Path | None, event: Any) -> None:
    """Append a typed event to ``path``; no-op when ``path`` is None.

    Write failures are logged and swallowed so that the event log can never
    break session initialization.
    """
    if path is None:
        return
    try:
        _append_event_raw(path, event.to_dict())
    except OSError:
        logger.warning("Could not append %s to %s", type(event).__name__, path, exc_info=True)
