# touchui/config.py

import logging
import os
from dataclasses import dataclass, field
from typing import List

# --- Base paths ---
# Project root can be overridden if needed (e.g. for tests or deployment)
BASE_DIR = os.path.abspath(os.getenv("TOUCHUI_BASE_DIR", os.path.join(os.path.dirname(__file__), "..")))

LOAD_MODES = ("session", "startup")


def _split_dirs(raw: str | None) -> List[str]:
    if not raw:
        return [os.path.join(BASE_DIR, "resources")]
    return [p for p in raw.split(os.pathsep) if p]


def parse_flag(raw, default: bool) -> bool:
    """Interpret an env or JSON value as a boolean ("false" is False)."""
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    return parse_flag(os.getenv(name), default)


# ---------------------------
# Structured configuration
# ---------------------------

@dataclass(frozen=True)
class ScriptConfig:
    """Which script resource a new UI session loads, and how.

    Values can be overridden via environment variables:
    - TOUCHUI_SCRIPT_NAME
    - TOUCHUI_ENTRY_FUNCTION
    - TOUCHUI_RESOURCE_DIRS (os.pathsep-separated)
    - TOUCHUI_LOAD_MODE ("session" or "startup")
    """

    script_name: str = field(default_factory=lambda: os.getenv("TOUCHUI_SCRIPT_NAME", "clotouch.py"))
    entry_function: str = field(default_factory=lambda: os.getenv("TOUCHUI_ENTRY_FUNCTION", "main"))
    resource_dirs: List[str] = field(
        default_factory=lambda: _split_dirs(os.getenv("TOUCHUI_RESOURCE_DIRS"))
    )
    # "session": load the script on every new session.
    # "startup": load once per process and reuse the resolved entry function.
    load_mode: str = field(default_factory=lambda: os.getenv("TOUCHUI_LOAD_MODE", "session"))


@dataclass(frozen=True)
class SessionLogConfig:
    """Append-only JSONL event log for session initialization outcomes.

    Values can be overridden via environment variables:
    - TOUCHUI_EVENT_LOG_DIR
    - TOUCHUI_EVENT_LOG_ENABLED (off unless set; nothing prunes old files)
    """

    event_log_dir: str = field(
        default_factory=lambda: os.getenv(
            "TOUCHUI_EVENT_LOG_DIR", os.path.join(BASE_DIR, "ui_state", "sessions")
        )
    )
    enabled: bool = field(default_factory=lambda: _env_flag("TOUCHUI_EVENT_LOG_ENABLED", False))


@dataclass(frozen=True)
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("TOUCHUI_LOG_LEVEL", "INFO"))
    fmt: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


SCRIPT = ScriptConfig()
SESSION_LOG = SessionLogConfig()
LOGGING = LoggingConfig()

# Flat aliases
SCRIPT_NAME = SCRIPT.script_name
ENTRY_FUNCTION = SCRIPT.entry_function
RESOURCE_DIRS = SCRIPT.resource_dirs
LOAD_MODE = SCRIPT.load_mode
EVENT_LOG_DIR = SESSION_LOG.event_log_dir
EVENT_LOG_ENABLED = SESSION_LOG.enabled


def validate_load_mode(mode: str) -> str:
    mode = str(mode).strip().lower()
    if mode not in LOAD_MODES:
        raise ValueError(f"load_mode must be one of {LOAD_MODES}, got {mode!r}")
    return mode


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging once.

    Safe to call on every Streamlit rerun: if the root logger already has
    handlers only the level of the ``touchui`` logger is adjusted.
    """

    lvl = level if level is not None else LOGGING.level
    if isinstance(lvl, str):
        lvl = logging.getLevelName(lvl.upper())
        if not isinstance(lvl, int):
            lvl = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=lvl, format=LOGGING.fmt)
    logging.getLogger("touchui").setLevel(lvl)
