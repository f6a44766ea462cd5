"""UI session context and the session entry point.

``UISession`` is the object a script receives: it starts empty and the
script fills it via :meth:`UISession.set_content`. ``SessionEntryPoint`` is
what the hosting app calls once per new session.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable

from touchui.core.config_resolver import ScriptSettings
from touchui.core.contracts import ResourceLoadFailure, SessionInitResult
from touchui.events import (
    EntryInvokedEvent,
    ScriptLoadedEvent,
    ScriptLoadFailedEvent,
    SessionStartEvent,
    append_event,
)
from touchui.registry import InitializerRegistry
from touchui.scripting import invoke, load_resource_script, resolve_function
from touchui.session_log import make_log_path

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class UISession:
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at_utc: str = field(default_factory=_utc_now_iso)
    title: str | None = None
    content: Callable[[Any], Any] | None = None

    def set_title(self, title: str | None) -> None:
        self.title = title

    def set_content(self, render: Callable[[Any], Any] | None) -> None:
        """Set the function that draws this session's UI.

        ``render`` is called with the Streamlit module on every rerun.
        """
        if render is not None and not callable(render):
            raise TypeError("content must be callable or None")
        self.content = render

    @property
    def has_content(self) -> bool:
        return self.content is not None

    def render(self, st) -> None:  # noqa: ANN001
        if self.title:
            st.title(self.title)
        if self.content is not None:
            self.content(st)


class SessionEntryPoint:
    def __init__(
        self,
        script_name: str,
        entry_function: str = "main",
        *,
        resource_dirs: Iterable[str | Path] = (),
        registry: InitializerRegistry | None = None,
        event_log_dir: str | Path | None = None,
    ) -> None:
        self.script_name = script_name
        self.entry_function = entry_function
        self.resource_dirs = tuple(resource_dirs)
        self.registry = registry
        self.event_log_dir = Path(event_log_dir) if event_log_dir is not None else None

    @classmethod
    def from_settings(cls, settings: ScriptSettings, *, registry: InitializerRegistry | None = None) -> "SessionEntryPoint":
        """Build an entry point from resolved script settings.

        In ``startup`` mode a registry is required; one is created and
        preloaded here when the caller does not supply it.
        """
        if settings.load_mode == "startup":
            if registry is None:
                registry = InitializerRegistry()
                registry.preload(
                    settings.script_name,
                    settings.entry_function,
                    resource_dirs=settings.resource_dirs,
                )
        else:
            registry = None

        return cls(
            settings.script_name,
            settings.entry_function,
            resource_dirs=settings.resource_dirs,
            registry=registry,
            event_log_dir=settings.event_log_dir,
        )

    @property
    def load_mode(self) -> str:
        return "startup" if self.registry is not None else "session"

    def _log_path(self, session_id: str | None) -> Path | None:
        if self.event_log_dir is None or not session_id:
            return None
        try:
            return make_log_path(session_id=session_id, sessions_dir=self.event_log_dir)
        except OSError:
            logger.warning("Event log directory %s is not writable", self.event_log_dir, exc_info=True)
            return None

    def _resolve_initializer(self) -> Callable[[Any], Any]:
        if self.registry is not None:
            return self.registry.get(self.script_name)
        namespace = load_resource_script(self.script_name, resource_dirs=self.resource_dirs)
        return resolve_function(namespace, self.entry_function)

    def initialize_session(self, context: Any) -> SessionInitResult:
        """Load the script and call its entry function with ``context``.

        A :class:`ResourceLoadFailure` is logged and returned as a failed
        result; the context is left untouched. Anything else (a missing entry
        function, an error raised by the script) propagates.
        """
        if context is None:
            raise ValueError("session context must not be None")

        session_id = getattr(context, "session_id", None)
        log_path = self._log_path(session_id)
        append_event(
            log_path,
            SessionStartEvent(
                session_id=str(session_id),
                script_name=self.script_name,
                entry_function=self.entry_function,
                load_mode=self.load_mode,
            ),
        )

        try:
            initializer = self._resolve_initializer()
        except ResourceLoadFailure as exc:
            logger.exception("Session %s: could not load script resource %s", session_id, self.script_name)
            result = SessionInitResult.failed(
                exc,
                session_id=session_id,
                script_name=self.script_name,
                entry_function=self.entry_function,
            )
            append_event(
                log_path,
                ScriptLoadFailedEvent(
                    session_id=str(session_id),
                    script_name=self.script_name,
                    error=result.error or "",
                    traceback=result.traceback,
                ),
            )
            return result

        append_event(
            log_path,
            ScriptLoadedEvent(
                session_id=str(session_id),
                script_name=self.script_name,
                entry_function=self.entry_function,
            ),
        )

        t0 = time.perf_counter()
        invoke(initializer, context)
        duration_ms = (time.perf_counter() - t0) * 1000.0

        append_event(
            log_path,
            EntryInvokedEvent(
                session_id=str(session_id),
                script_name=self.script_name,
                entry_function=self.entry_function,
                duration_ms=round(duration_ms, 3),
            ),
        )
        logger.info("Session %s initialized by %s.%s", session_id, self.script_name, self.entry_function)

        return SessionInitResult.succeeded(
            session_id=session_id,
            script_name=self.script_name,
            entry_function=self.entry_function,
        )
