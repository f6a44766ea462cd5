"""Behavioral tests for SessionEntryPoint.initialize_session."""

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

import touchui.session as session_mod
from touchui.core.config_resolver import ScriptSettings
from touchui.core.contracts import EntryFunctionNotFound
from touchui.registry import InitializerRegistry
from touchui.session import SessionEntryPoint, UISession
from touchui.session_log import make_log_path, read_events

RECORDING_SCRIPT = """
    loaded_marker = object()

    def main(ui):
        ui.calls.append(loaded_marker)
        return "ignored"
"""


def _context(session_id: str = "s1") -> SimpleNamespace:
    return SimpleNamespace(session_id=session_id, calls=[])


@pytest.fixture
def count_loads(monkeypatch):
    calls: list[str] = []
    real = session_mod.load_resource_script

    def _counting(name, *, resource_dirs=()):  # noqa: ANN001
        calls.append(name)
        return real(name, resource_dirs=resource_dirs)

    monkeypatch.setattr(session_mod, "load_resource_script", _counting)
    return calls


def test_resource_present_invokes_entry_once(write_script, count_loads) -> None:
    d = write_script("clotouch.py", RECORDING_SCRIPT)
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d])
    ctx = _context()

    result = ep.initialize_session(ctx)

    assert result.ok
    assert result.session_id == "s1"
    assert count_loads == ["clotouch.py"]
    assert len(ctx.calls) == 1


def test_resource_absent_reports_and_does_not_raise(tmp_path: Path, count_loads, caplog) -> None:
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[tmp_path])
    ctx = _context()

    with caplog.at_level(logging.ERROR, logger="touchui.session"):
        result = ep.initialize_session(ctx)

    assert not result.ok
    assert "ResourceLoadFailure" in (result.error or "")
    assert "Traceback" in (result.traceback or "")
    assert count_loads == ["clotouch.py"]
    assert ctx.calls == []
    assert any("could not load script resource" in r.getMessage() for r in caplog.records)
    assert any(r.exc_info for r in caplog.records)


def test_absent_resource_leaves_ui_session_blank(tmp_path: Path) -> None:
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[tmp_path])
    ui = UISession()

    ep.initialize_session(ui)

    assert ui.title is None
    assert not ui.has_content


def test_two_sessions_get_independent_cycles(write_script, count_loads) -> None:
    d = write_script("clotouch.py", RECORDING_SCRIPT)
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d])
    a, b = _context("a"), _context("b")

    ep.initialize_session(a)
    ep.initialize_session(b)

    assert count_loads == ["clotouch.py", "clotouch.py"]
    assert len(a.calls) == 1 and len(b.calls) == 1
    # Each session ran against its own freshly loaded module.
    assert a.calls[0] is not b.calls[0]


def test_missing_entry_function_propagates(write_script) -> None:
    d = write_script("clotouch.py", "x = 1\n")
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d])

    with pytest.raises(EntryFunctionNotFound):
        ep.initialize_session(_context())


def test_error_inside_entry_function_propagates(write_script) -> None:
    d = write_script("clotouch.py", "def main(ui):\n    raise RuntimeError('script bug')\n")
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d])

    with pytest.raises(RuntimeError, match="script bug"):
        ep.initialize_session(_context())


def test_none_context_rejected(tmp_path: Path) -> None:
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[tmp_path])
    with pytest.raises(ValueError):
        ep.initialize_session(None)


def test_custom_entry_function_name(write_script) -> None:
    d = write_script("other.py", "def start(ui):\n    ui.calls.append('start')\n")
    ep = SessionEntryPoint("other.py", "start", resource_dirs=[d])
    ctx = _context()

    assert ep.initialize_session(ctx).ok
    assert ctx.calls == ["start"]


def test_events_are_logged_per_session(write_script, tmp_path: Path) -> None:
    d = write_script("clotouch.py", RECORDING_SCRIPT)
    log_dir = tmp_path / "sessions"
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d], event_log_dir=log_dir)

    ep.initialize_session(_context("ok-session"))
    events = read_events(make_log_path(session_id="ok-session", sessions_dir=log_dir))
    assert [e["type"] for e in events] == ["session_start", "script_loaded", "entry_invoked"]
    assert events[0]["load_mode"] == "session"
    assert events[-1]["duration_ms"] >= 0

    missing = SessionEntryPoint("missing.py", "main", resource_dirs=[d], event_log_dir=log_dir)
    missing.initialize_session(_context("bad-session"))
    events = read_events(make_log_path(session_id="bad-session", sessions_dir=log_dir))
    assert [e["type"] for e in events] == ["session_start", "script_load_failed"]
    assert "missing.py" in events[-1]["error"]


def test_startup_mode_uses_registry_without_loading(write_script, count_loads) -> None:
    d = write_script("clotouch.py", RECORDING_SCRIPT)
    registry = InitializerRegistry()
    assert registry.preload("clotouch.py", "main", resource_dirs=[d])

    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d], registry=registry)
    a, b = _context("a"), _context("b")
    ep.initialize_session(a)
    ep.initialize_session(b)

    assert ep.load_mode == "startup"
    assert count_loads == []
    assert len(a.calls) == 1 and len(b.calls) == 1


def test_startup_mode_failed_preload_reported_per_session(tmp_path: Path) -> None:
    registry = InitializerRegistry()
    assert not registry.preload("clotouch.py", "main", resource_dirs=[tmp_path])

    ep = SessionEntryPoint("clotouch.py", "main", registry=registry)
    first = ep.initialize_session(_context("a"))
    second = ep.initialize_session(_context("b"))

    assert not first.ok and not second.ok
    assert "not found" in (first.error or "")


def test_from_settings_selects_load_mode(write_script) -> None:
    d = write_script("clotouch.py", RECORDING_SCRIPT)
    base = dict(
        script_name="clotouch.py",
        entry_function="main",
        resource_dirs=(str(d),),
        event_log_dir=None,
    )

    session_ep = SessionEntryPoint.from_settings(ScriptSettings(load_mode="session", **base))
    assert session_ep.registry is None

    startup_ep = SessionEntryPoint.from_settings(ScriptSettings(load_mode="startup", **base))
    assert startup_ep.registry is not None
    assert startup_ep.registry.names() == ["clotouch.py"]


def test_script_with_dataclasses_initializes_session(write_script) -> None:
    d = write_script("clotouch.py", """
        from __future__ import annotations

        from dataclasses import dataclass
        from typing import ClassVar


        @dataclass
        class Greeting:
            prefix: ClassVar[str] = "Hello"
            name: str = "touch"


        def main(ui):
            g = Greeting()
            ui.set_title(f"{g.prefix} {g.name}")
    """)
    ep = SessionEntryPoint("clotouch.py", "main", resource_dirs=[d])
    ui = UISession()

    assert ep.initialize_session(ui).ok
    assert ui.title == "Hello touch"
