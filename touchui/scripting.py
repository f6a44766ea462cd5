"""Script resource loading and late-bound invocation.

A script resource is either
- a ``.py`` file looked up in an ordered list of resource directories, or
- a dotted module path importable from ``sys.path``.

File resources are executed into a fresh module object on every load. The
module sits in ``sys.modules`` under a unique name only while its body runs,
so two sessions that load the same file get separate module globals.

Only "cannot find / cannot read" conditions are reported as
:class:`ResourceLoadFailure`. Errors raised while compiling or executing the
script body propagate unchanged.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import os
import sys
import uuid
from dataclasses import asdict, dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterable

from touchui.core.contracts import EntryFunctionNotFound, ResourceLoadFailure

logger = logging.getLogger(__name__)


def is_file_resource(name: str) -> bool:
    return name.endswith(".py") or "/" in name or os.sep in name


def resolve_resource(name: str, resource_dirs: Iterable[str | Path]) -> Path:
    """Return the first existing file for ``name`` in ``resource_dirs``."""

    if not name:
        raise ResourceLoadFailure(name, "empty resource name")

    direct = Path(name)
    if direct.is_absolute():
        if direct.is_file():
            return direct
        raise ResourceLoadFailure(name, "file does not exist")

    searched: list[str] = []
    for d in resource_dirs:
        candidate = Path(d) / name
        searched.append(str(Path(d)))
        if candidate.is_file():
            return candidate

    raise ResourceLoadFailure(name, f"not found in {searched or 'no resource directories'}")


def _load_file_module(name: str, path: Path) -> ModuleType:
    try:
        path.read_bytes()
    except OSError as exc:
        raise ResourceLoadFailure(name, f"read error: {exc}") from exc

    # Unique per load so concurrent sessions never collide in sys.modules.
    module_name = f"touchui_script_{path.stem}_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ResourceLoadFailure(name, f"no loader for {path}")

    module = importlib.util.module_from_spec(spec)
    # dataclasses and typing resolve the defining module through sys.modules
    # while the script body runs.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
    return module


def _import_module(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as exc:
        # Only the resource itself (or one of its parent packages) missing is a
        # load failure. A missing dependency of the script is the script's problem.
        missing = exc.name or ""
        if missing and (name == missing or name.startswith(missing + ".")):
            raise ResourceLoadFailure(name, f"module {missing!r} not found") from exc
        raise


def load_resource_script(name: str, *, resource_dirs: Iterable[str | Path] = ()) -> ModuleType:
    """Load a script resource and return its namespace."""

    if is_file_resource(name):
        path = resolve_resource(name, resource_dirs)
        logger.debug("Loading script resource %s from %s", name, path)
        return _load_file_module(name, path)

    logger.debug("Importing script module %s", name)
    return _import_module(name)


def resolve_function(namespace: ModuleType, name: str) -> Callable[[Any], Any]:
    fn = getattr(namespace, name, None)
    if fn is None or not callable(fn):
        raise EntryFunctionNotFound(getattr(namespace, "__name__", "?"), name)
    return fn


def invoke(fn: Callable[[Any], Any], context: Any) -> None:
    # Return value is discarded.
    fn(context)


@dataclass(frozen=True)
class ScriptCheck:
    script_name: str
    entry_function: str
    loadable: bool
    entry_found: bool
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.loadable and self.entry_found

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def check_script(
    script_name: str,
    entry_function: str,
    *,
    resource_dirs: Iterable[str | Path] = (),
) -> ScriptCheck:
    """Load ``script_name`` and look up ``entry_function`` without invoking it.

    Unlike the session entry point this reports every failure (including
    errors raised by the script body) in the returned object.
    """
    try:
        namespace = load_resource_script(script_name, resource_dirs=resource_dirs)
    except Exception as exc:  # noqa: BLE001
        return ScriptCheck(script_name, entry_function, loadable=False, entry_found=False, error=repr(exc))

    try:
        resolve_function(namespace, entry_function)
    except EntryFunctionNotFound as exc:
        return ScriptCheck(script_name, entry_function, loadable=True, entry_found=False, error=str(exc))

    return ScriptCheck(script_name, entry_function, loadable=True, entry_found=True)
