from __future__ import annotations

import traceback as _traceback
from dataclasses import asdict, dataclass
from typing import Any


class ResourceLoadFailure(Exception):
    """A script resource could not be found or read."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"cannot load script resource {name!r}: {reason}")
        self.name = name
        self.reason = reason


class EntryFunctionNotFound(LookupError):
    """The script loaded but does not define a callable entry function."""

    def __init__(self, script_name: str, function_name: str) -> None:
        super().__init__(f"script {script_name!r} has no callable {function_name!r}")
        self.script_name = script_name
        self.function_name = function_name


@dataclass(frozen=True)
class SessionInitResult:
    ok: bool
    session_id: str | None
    script_name: str
    entry_function: str
    error: str | None = None
    traceback: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "SessionInitResult":
        return cls(**d)

    @classmethod
    def succeeded(cls, *, session_id: str | None, script_name: str, entry_function: str) -> "SessionInitResult":
        return cls(ok=True, session_id=session_id, script_name=script_name, entry_function=entry_function)

    @classmethod
    def failed(
        cls,
        exc: BaseException,
        *,
        session_id: str | None,
        script_name: str,
        entry_function: str,
    ) -> "SessionInitResult":
        return cls(
            ok=False,
            session_id=session_id,
            script_name=script_name,
            entry_function=entry_function,
            error=repr(exc),
            traceback="".join(_traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )
