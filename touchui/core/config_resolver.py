"""Config resolution: merge code defaults with user overrides.

This module provides a clean separation between:
- Code defaults in touchui/config.py (environment-driven, read-only)
- User-mutable overrides in configs/active.json (script name, entry function,
  resource directories, load mode)

Callers should go through :func:`get_script_settings` instead of reading the
module-level constants so that edits to active.json are picked up on the next
session without restarting the server.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


def _get_repo_root() -> Path:
    """Return the repository root directory."""
    # touchui/core/config_resolver.py -> touchui/core -> touchui -> repo_root
    return Path(__file__).resolve().parents[2]


def _get_active_config_path() -> Path:
    """Return the path to configs/active.json."""
    return _get_repo_root() / "configs" / "active.json"


def _load_active_config() -> dict[str, Any]:
    """Load user overrides from configs/active.json.

    Returns an empty dict if the file does not exist or is invalid.
    """
    path = _get_active_config_path()
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding="utf-8").strip()
        if not content:
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            return {}
        return data
    except (OSError, json.JSONDecodeError):
        return {}


def _save_active_config(config: dict[str, Any]) -> None:
    """Save user overrides to configs/active.json, creating the directory if needed."""
    path = _get_active_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8")


@dataclass(frozen=True)
class ScriptSettings:
    script_name: str
    entry_function: str
    resource_dirs: tuple[str, ...]
    load_mode: str
    event_log_dir: str | None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["resource_dirs"] = list(self.resource_dirs)
        return d


def _resolve_dir(raw: str) -> str:
    p = Path(raw)
    if not p.is_absolute():
        p = _get_repo_root() / p
    return str(p)


def get_script_settings() -> ScriptSettings:
    """Return effective script settings by merging config.py + active.json.

    Priority:
    1. User overrides from configs/active.json (highest)
    2. Code defaults from touchui/config.py

    Relative resource directories in active.json are resolved against the
    repository root. ``event_log_dir`` is None when the event log is disabled.
    """
    # Import inside function so tests can monkeypatch the config module.
    from touchui import config

    active = _load_active_config()
    overrides = active.get("script", {})
    if not isinstance(overrides, dict):
        overrides = {}

    raw_dirs = overrides.get("resource_dirs")
    if isinstance(raw_dirs, str):
        raw_dirs = [raw_dirs]
    if raw_dirs:
        resource_dirs = tuple(_resolve_dir(str(d)) for d in raw_dirs)
    else:
        resource_dirs = tuple(config.SCRIPT.resource_dirs)

    event_log_enabled = config.parse_flag(overrides.get("event_log_enabled"), config.SESSION_LOG.enabled)

    return ScriptSettings(
        script_name=str(overrides.get("script_name", config.SCRIPT.script_name)),
        entry_function=str(overrides.get("entry_function", config.SCRIPT.entry_function)),
        resource_dirs=resource_dirs,
        load_mode=config.validate_load_mode(overrides.get("load_mode", config.SCRIPT.load_mode)),
        event_log_dir=config.SESSION_LOG.event_log_dir if event_log_enabled else None,
    )


def save_script_settings(
    *,
    script_name: str | None = None,
    entry_function: str | None = None,
    resource_dirs: list[str] | None = None,
    load_mode: str | None = None,
) -> None:
    """Save script overrides to configs/active.json.

    Only the arguments that are given are written; existing keys are kept.
    Does NOT edit touchui/config.py.
    """
    from touchui.config import validate_load_mode

    active = _load_active_config()
    section = active.setdefault("script", {})

    if script_name is not None:
        section["script_name"] = str(script_name)
    if entry_function is not None:
        section["entry_function"] = str(entry_function)
    if resource_dirs is not None:
        section["resource_dirs"] = [str(d) for d in resource_dirs]
    if load_mode is not None:
        section["load_mode"] = validate_load_mode(load_mode)

    _save_active_config(active)
