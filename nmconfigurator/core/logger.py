# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/core/logger.py
"""
Logging for both the build host (interactive, coloured) and the boot-time
apply run (journald, optionally NDJSON).

Every record may carry a `ctx` dict (host, file, path, ...). The line
formatter appends it as key=value pairs; the JSON formatter nests it.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from termcolor import colored as _colored

LOGGER_NAME = "nmconfigurator"

TRACE = 5
if logging.getLevelName(TRACE) != "TRACE":
    logging.addLevelName(TRACE, "TRACE")

# levelname -> (emoji, termcolor colour)
_LEVELS: Dict[str, Tuple[str, str]] = {
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}


def is_tty(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def _stderr_takes_emoji() -> bool:
    try:
        "✅".encode(getattr(sys.stderr, "encoding", None) or "utf-8")
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def c(text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None, *, enable: bool = True) -> str:
    """Colorize text if enabled."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


Ctx = Mapping[str, Any]


def _clip(v: Any, limit: int = 240) -> str:
    s = str(v).replace("\r", "\\r").replace("\n", "\\n")
    return s if len(s) <= limit else s[: limit - 1] + "…"


def _merged(*ctxs: Optional[Ctx]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for ctx in ctxs:
        if ctx:
            out.update(ctx)
    return out


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that stamps a fixed context onto every record, e.g.

      log = Log.bind(logger, host="node1")
      log.info("Copying file... %s", path)   # ... host=node1

    A call-site `extra={"ctx": {...}}` is merged on top.
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, {"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["ctx"] = _merged(self.extra["ctx"], extra.get("ctx"))
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, _merged(self.extra["ctx"], ctx))


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    detailed: bool = False  # milliseconds, pid, logger name, module:line
    utc: bool = False
    unicode: bool = True


class EmojiFormatter(logging.Formatter):
    """`12:00:01 ✅ INFO     message key=value`"""

    def __init__(self, style: LogStyle):
        super().__init__()
        self._style = style

    def _timestamp(self, created: float) -> str:
        tz = _dt.timezone.utc if self._style.utc else None
        ts = _dt.datetime.fromtimestamp(created, tz=tz)
        return ts.strftime("%H:%M:%S.%f")[:-3] if self._style.detailed else ts.strftime("%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        emoji, color = _LEVELS.get(record.levelname, ("•", ""))
        if not self._style.unicode:
            emoji = "·"
        colored = self._style.color and is_tty(sys.stderr)

        level = c(f"{record.levelname:<8}", color, enable=colored)
        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, color, ["bold"], enable=colored)

        where = ""
        if self._style.detailed:
            where = f" [pid={os.getpid()} {record.name} {record.module}:{record.lineno}]"

        ctx = getattr(record, "ctx", None) or {}
        tail = "".join(f" {_clip(k, 80)}={_clip(v)}" for k, v in sorted(ctx.items(), key=lambda kv: str(kv[0])))

        line = f"{self._timestamp(record.created)} {emoji} {level}{where} {msg}{tail}"
        if record.exc_info:
            tb = "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
            line += "\n" + c(tb, "red", enable=colored)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for journald and log shippers."""

    def __init__(self, *, utc: bool = True):
        super().__init__()
        self._tz = _dt.timezone.utc if utc else None

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=self._tz).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
            "module": record.module,
            "lineno": record.lineno,
        }
        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = {str(k): _clip(v) for k, v in ctx.items()}
        if record.exc_info:
            obj["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child of the project logger, e.g. get_logger("generator")."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
        -qq ERROR, -q WARNING, default INFO, -vv DEBUG, -vvv TRACE.
        Quiet wins over verbose.
        """
        if quiet:
            return logging.ERROR if quiet >= 2 else logging.WARNING
        if verbose >= 3:
            return TRACE
        return logging.DEBUG if verbose >= 2 else logging.INFO

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def _emit(logger: logging.Logger, level: int, prefix: str, msg: str, ctx: Dict[str, Any]) -> None:
        logger.log(level, "%s %s", prefix, msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.INFO, "➡️ ", msg, ctx)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.INFO, "✅", msg, ctx)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.WARNING, "⚠️ ", msg, ctx)

    @staticmethod
    def fail(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        Log._emit(logger, logging.ERROR, "💥", msg, ctx)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any) -> None:
        logger.log(TRACE, msg, *args)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        utc: bool = False,
        json_logs: bool = False,
        logger_name: str = LOGGER_NAME,
    ) -> logging.Logger:
        """
        (Re)configure the project logger: one stderr handler plus an optional
        file handler. Handlers from a previous call are closed and replaced.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        unicode_ok = _stderr_takes_emoji()

        def _formatter(*, for_file: bool) -> logging.Formatter:
            if json_logs:
                return JsonFormatter(utc=utc)
            return EmojiFormatter(
                LogStyle(
                    color=color and not for_file,
                    detailed=for_file or verbose >= 3,
                    utc=utc,
                    unicode=unicode_ok,
                )
            )

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        handlers[0].setFormatter(_formatter(for_file=False))

        if log_file:
            path = Path(log_file).expanduser().resolve()
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
            fh.setFormatter(_formatter(for_file=True))
            handlers.append(fh)

        for h in handlers:
            h.setLevel(level)
            logger.addHandler(h)

        logger.debug("Logger initialized (level=%s)", logging.getLevelName(level))
        return logger
