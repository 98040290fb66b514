# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/core/exceptions.py
"""
Error hierarchy. The exception class decides the process exit code:

    InputError       2   missing/unreadable input, malformed documents
    ValidationError  3   documents that parse but describe an unusable host
    HostNotFoundError 4  no preconfigured host owns a local MAC
    EngineError      5   nmstatectl missing, failing, or returning garbage
    Fatal            any (1 for I/O on our own output)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Context keys containing any of these are never printed.
_REDACT = ("pass", "psk", "secret", "token", "private", "key")


def _flatten(s: Any, limit: int = 600) -> str:
    s = " ".join(str(s or "").split())
    return s if len(s) <= limit else s[: limit - 3] + "..."


def _exit_code(code: Any) -> int:
    try:
        code = int(code)
    except (TypeError, ValueError):
        return 1
    return 1 if code < 0 else min(code, 255)


def _render_context(ctx: Dict[str, Any]) -> str:
    out = []
    for k in sorted(ctx, key=str):
        redacted = any(part in str(k).lower() for part in _REDACT)
        out.append(f"{k}=<redacted>" if redacted else f"{k}={ctx[k]!r}")
    return ", ".join(out)


@dataclass(eq=False)
class NmConfiguratorError(Exception):
    """
    Base error. `msg` is what the user sees; `context` is shown with -v and
    `cause` with -vv.
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self.msg = _flatten(self.msg) or type(self).__name__
        super().__init__(self.msg)

    def with_context(self, **ctx: Any) -> "NmConfiguratorError":
        self.context = {**(self.context or {}), **ctx}
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        text = self.msg
        if include_context and self.context:
            text += f" [{_flatten(_render_context(self.context))}]"
        if include_cause and self.cause is not None:
            text += f" (cause: {type(self.cause).__name__}: {_flatten(self.cause)})"
        return text

    def __str__(self) -> str:
        return self.msg

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.msg,
            "context": dict(self.context or {}),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _flatten(self.cause)}
        return d


class Fatal(NmConfiguratorError):
    """Raised positionally: Fatal(2, "generate: --config-dir is required")."""
    pass


@dataclass(eq=False)
class InputError(NmConfiguratorError):
    code: int = 2


@dataclass(eq=False)
class EmptyConfigDirError(InputError):
    msg: str = "Empty config directory"


@dataclass(eq=False)
class InvalidDocumentError(InputError):
    """A network-state document that is not valid YAML or lacks interface names."""
    pass


@dataclass(eq=False)
class MappingFormatError(InputError):
    """host_config.yaml is not a sequence of host records."""
    pass


@dataclass(eq=False)
class ValidationError(NmConfiguratorError):
    code: int = 3


@dataclass(eq=False)
class NoEthernetInterfacesError(ValidationError):
    msg: str = "No Ethernet interfaces were provided"


@dataclass(eq=False)
class MissingMacAddressError(ValidationError):
    pass


@dataclass(eq=False)
class DuplicateHostError(ValidationError):
    pass


@dataclass(eq=False)
class HostNotFoundError(NmConfiguratorError):
    code: int = 4
    msg: str = "None of the preconfigured hosts match local NICs"


@dataclass(eq=False)
class EngineError(NmConfiguratorError):
    code: int = 5


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = 1, **context: Any) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """Single line for the CLI; -v adds context, -vv adds the cause."""
    if isinstance(e, NmConfiguratorError):
        return e.user_message(include_context=verbose >= 1, include_cause=verbose >= 2)
    if verbose >= 2:
        return f"{type(e).__name__}: {_flatten(e)}"
    return _flatten(e) or type(e).__name__
