"""UI state management for the Streamlit app.

Provides centralized access to the per-session context and the stored result
of its one-time initialization.
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from touchui.core.contracts import SessionInitResult
from touchui.session import SessionEntryPoint, UISession

SESSION_KEY = "touchui_session"
INIT_RESULT_KEY = "touchui_init_result"


def get_ui_session() -> tuple[UISession, bool]:
    """Return this browser session's UISession, creating it on first access.

    The bool is True when the session object was created by this call.
    """
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = UISession()
        return st.session_state[SESSION_KEY], True
    return st.session_state[SESSION_KEY], False


def get_init_result() -> SessionInitResult | None:
    raw: Any = st.session_state.get(INIT_RESULT_KEY)
    if not isinstance(raw, dict):
        return None
    try:
        return SessionInitResult.from_dict(raw)
    except TypeError:
        return None


def ensure_session_initialized(entry_point: SessionEntryPoint) -> SessionInitResult:
    """Run ``entry_point`` for this session unless it already ran.

    The result is stored before returning, including when the script raises,
    so a session is never initialized twice.
    """
    existing = get_init_result()
    if existing is not None:
        return existing

    ui_session, _ = get_ui_session()
    try:
        result = entry_point.initialize_session(ui_session)
    except Exception as exc:
        st.session_state[INIT_RESULT_KEY] = SessionInitResult.failed(
            exc,
            session_id=ui_session.session_id,
            script_name=entry_point.script_name,
            entry_function=entry_point.entry_function,
        ).to_dict()
        raise

    st.session_state[INIT_RESULT_KEY] = result.to_dict()
    return result
