"""Startup-time registry of session initializers.

In ``startup`` load mode the app resolves the script's entry function once per
process and every new session looks it up by name, instead of re-reading the
script on each session.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Protocol

from touchui.core.contracts import ResourceLoadFailure
from touchui.scripting import load_resource_script, resolve_function

logger = logging.getLogger(__name__)


class SessionInitializer(Protocol):
    def __call__(self, context: Any) -> Any: ...


class InitializerRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._initializers: dict[str, SessionInitializer] = {}
        self._failures: dict[str, ResourceLoadFailure] = {}

    def register(self, name: str, initializer: SessionInitializer) -> None:
        if not callable(initializer):
            raise TypeError(f"initializer for {name!r} is not callable")
        with self._lock:
            self._initializers[name] = initializer
            self._failures.pop(name, None)

    def get(self, name: str) -> SessionInitializer:
        """Return the initializer registered under ``name``.

        Raises :class:`ResourceLoadFailure` carrying the remembered reason if
        preloading ``name`` failed, or a generic one if nothing was registered.
        """
        with self._lock:
            if name in self._initializers:
                return self._initializers[name]
            failure = self._failures.get(name)
        if failure is not None:
            raise ResourceLoadFailure(failure.name, failure.reason) from failure
        raise ResourceLoadFailure(name, "no initializer registered")

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._initializers)

    def preload(
        self,
        script_name: str,
        entry_function: str,
        *,
        resource_dirs: Iterable[str | Path] = (),
    ) -> bool:
        """Load ``script_name`` now and register its entry function.

        Returns False (and remembers the failure) when the resource cannot be
        loaded. A missing entry function raises EntryFunctionNotFound.
        """
        try:
            namespace = load_resource_script(script_name, resource_dirs=resource_dirs)
        except ResourceLoadFailure as exc:
            logger.exception("Preloading script resource %s failed", script_name)
            with self._lock:
                self._failures[script_name] = exc
            return False

        self.register(script_name, resolve_function(namespace, entry_function))
        logger.info("Registered %s.%s as session initializer", script_name, entry_function)
        return True
