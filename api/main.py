from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from touchui.config import configure_logging
from touchui.core.config_resolver import get_script_settings
from touchui.scripting import check_script
from touchui.session_log import default_sessions_dir, list_logs, make_log_path, read_events

configure_logging()

app = FastAPI(
    title="TouchKit UI Diagnostics API",
    description="Reports whether the configured session script can be loaded.",
    version="1.0.0",
)


# Pydantic model for the script status response
class ScriptStatus(BaseModel):
    script_name: str
    entry_function: str
    load_mode: str
    loadable: bool
    entry_found: bool
    error: Optional[str] = None


class SessionLogSummary(BaseModel):
    session_id: str
    path: str


def _sessions_dir() -> Path:
    # Logs written before the event log was switched off stay readable.
    settings = get_script_settings()
    if settings.event_log_dir:
        return Path(settings.event_log_dir)
    return default_sessions_dir()


@app.get("/script", response_model=ScriptStatus, summary="Session script status")
async def script_status():
    """
    Loads the configured script resource and looks up its entry function.

    The entry function is never called. `loadable` is False when the resource
    is missing, unreadable or raises while loading; `entry_found` is False
    when the entry function is absent.
    """
    settings = get_script_settings()
    check = check_script(
        settings.script_name,
        settings.entry_function,
        resource_dirs=settings.resource_dirs,
    )
    return ScriptStatus(load_mode=settings.load_mode, **check.to_dict())


@app.get("/sessions", response_model=List[SessionLogSummary], summary="List session event logs")
async def list_session_logs():
    """
    Lists the per-session event logs, most recently modified first.
    """
    return [SessionLogSummary(session_id=info.session_id, path=str(info.path)) for info in list_logs(_sessions_dir())]


@app.get("/sessions/{session_id}/events", response_model=List[Dict[str, Any]], summary="Session events")
async def session_events(session_id: str, max_events: Optional[int] = Query(default=None, ge=1)):
    """
    Returns the recorded initialization events of one session, oldest first.

    With `max_events` only the last N events are returned.
    """
    path = make_log_path(session_id=session_id, sessions_dir=_sessions_dir(), create=False)
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"No event log for session {session_id}")
    return read_events(path, max_events=max_events)


@app.get("/health", summary="Health check", response_description="API health status")
async def health_check():
    """
    Checks the health of the API.
    """
    return {"status": "ok"}

# To run this API:
# uvicorn api.main:app --reload --port 8000
# Then access http://127.0.0.1:8000/docs for Swagger UI
