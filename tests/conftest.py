"""Pytest configuration to make the project root importable as a package.

This ensures that ``import touchui`` and ``import api`` work when tests are
run from the repository root or other locations.
"""

import os
import sys
import textwrap
from pathlib import Path
from types import SimpleNamespace

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def write_script(tmp_path: Path):
    """Write a script resource into tmp_path/resources and return its directory."""
    resources = tmp_path / "resources"
    resources.mkdir(parents=True, exist_ok=True)

    def _write(name: str, body: str) -> Path:
        (resources / name).write_text(textwrap.dedent(body), encoding="utf-8")
        return resources

    return _write


@pytest.fixture
def fake_st(monkeypatch):
    """Replace streamlit in touchui.ui.state with a dict-backed session state."""
    from touchui.ui import state

    fake = SimpleNamespace(session_state={})
    monkeypatch.setattr(state, "st", fake)
    return fake
