"""Streamlit UI entrypoint.

Run with ``streamlit run touchui/ui/app.py``. On the first run of each browser
session the configured script resource is loaded and its entry function is
called with the session's UISession. Every run then renders whatever the
script installed; a session whose script failed to load stays blank.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure repo root is on sys.path for imports.
repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

import streamlit as st

from touchui.config import configure_logging
from touchui.core.config_resolver import ScriptSettings, get_script_settings
from touchui.registry import InitializerRegistry
from touchui.session import SessionEntryPoint
from touchui.ui.state import ensure_session_initialized, get_init_result, get_ui_session


@st.cache_resource
def _startup_registry(
    script_name: str,
    entry_function: str,
    resource_dirs: tuple[str, ...],
) -> InitializerRegistry:
    """One preloaded registry per server process and script configuration."""
    registry = InitializerRegistry()
    registry.preload(script_name, entry_function, resource_dirs=resource_dirs)
    return registry


def build_entry_point(settings: ScriptSettings) -> SessionEntryPoint:
    registry = None
    if settings.load_mode == "startup":
        registry = _startup_registry(
            settings.script_name,
            settings.entry_function,
            tuple(settings.resource_dirs),
        )
    return SessionEntryPoint.from_settings(settings, registry=registry)


def main() -> None:
    configure_logging()

    ui_session, _ = get_ui_session()
    if get_init_result() is None:
        ensure_session_initialized(build_entry_point(get_script_settings()))

    ui_session.render(st)


if __name__ == "__main__":
    main()
