"""
verifreg.logging
----------------

Structured logging for the codec and its call facade.

Library modules only *emit* records through ``get_logger(__name__)``; the
application (or the CLI, via `configure_from_config`) decides where they go.

Call-scoped fields (trace id, method name, actor id) live in a ContextVar and
are stamped onto every record by a handler filter, so they survive across
nested helpers without being threaded through arguments:

    from verifreg import logging as vlog

    vlog.configure(json=True, level="DEBUG")
    with vlog.trace_scope():
        vlog.bind(method="GetClaims", actor=6)
        vlog.get_logger(__name__).debug("encoded", extra={"params_len": 7})

Output is newline-delimited JSON or a single-line text form. ``extra=`` values
are merged in; bytes become hex.

Environment: VERIFREG_LOG_FORMAT=json|text picks the console format when
``configure(json=None)``; otherwise JSON is used unless stderr is a TTY.
"""

from __future__ import annotations

import json as _json
import logging
import os
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Dict, Iterator, Optional

_ROOT = "verifreg"

_FIELDS: ContextVar[Dict[str, Any]] = ContextVar("verifreg_log_fields", default={})

# Attributes every LogRecord carries; anything else came from ``extra=``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("x", logging.INFO, __file__, 1, "m", (), None).__dict__
) | {"message", "asctime", "fields"}

# Printed first, in this order, by the text formatter.
_TEXT_KEYS = ("trace_id", "method", "actor")


# ---------------------------------------------------------------------------
# Call-scoped fields
# ---------------------------------------------------------------------------


def context() -> Dict[str, Any]:
    """Snapshot of the currently bound fields."""
    return dict(_FIELDS.get())


def bind(**fields: Any) -> None:
    merged = dict(_FIELDS.get())
    merged.update((k, _jsonable(v)) for k, v in fields.items())
    _FIELDS.set(merged)


def unbind(*keys: str) -> None:
    remaining = {k: v for k, v in _FIELDS.get().items() if k not in keys}
    _FIELDS.set(remaining)


def clear_context() -> None:
    _FIELDS.set({})


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """Bind a trace id for the block; everything bound inside is dropped on exit."""
    token = _FIELDS.set(dict(_FIELDS.get()))
    tid = trace_id or short_uuid()
    try:
        bind(trace_id=tid)
        yield tid
    finally:
        _FIELDS.reset(token)


# ---------------------------------------------------------------------------
# Record plumbing
# ---------------------------------------------------------------------------


def _jsonable(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_jsonable(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _jsonable(x) for k, x in v.items()}
    return str(v)


class _FieldsFilter(logging.Filter):
    """Copy bound fields and ``extra=`` values into ``record.fields``."""

    def filter(self, record: logging.LogRecord) -> bool:
        fields = dict(_FIELDS.get())
        for k, v in record.__dict__.items():
            if k not in _STANDARD_ATTRS and not k.startswith("_"):
                fields.setdefault(k, _jsonable(v))
        record.fields = fields
        return True


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in getattr(record, "fields", {}).items():
            out.setdefault(k, v)
        if record.exc_info:
            out["err"] = self.formatException(record.exc_info)
        return _json.dumps(out, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """
    One line per record:

        2026-01-05T12:34:56.789+00:00 | DEBUG | verifreg.api | trace_id=ab12 method=GetClaims | calling GetClaims
    """

    _COLORS = {
        logging.DEBUG: "\x1b[90m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, color: bool = False):
        super().__init__()
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        fields = dict(getattr(record, "fields", {}))
        ordered = [f"{k}={fields.pop(k)}" for k in _TEXT_KEYS if fields.get(k) is not None]
        ordered += [f"{k}={v}" for k, v in fields.items()]

        level = record.levelname
        if self._color:
            level = f"{self._COLORS.get(record.levelno, '')}{level}\x1b[0m"

        parts = [_timestamp(record), level, record.name]
        if ordered:
            parts.append(" ".join(ordered))
        parts.append(record.getMessage())
        line = " | ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def _is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and "NO_COLOR" not in os.environ


def _level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: Optional[IO[str]] = None,
    file_path: Optional[Path | str] = None,
) -> None:
    """
    Route the ``verifreg`` logger tree to ``stream`` (default: the current
    stderr) and, optionally, to a JSON-lines file. Replaces handlers installed
    by a previous call.
    """
    stream = stream if stream is not None else sys.stderr
    if json is None:
        env = os.environ.get("VERIFREG_LOG_FORMAT", "").strip().lower()
        json = env == "json" if env in ("json", "text") else not _is_tty(stream)
    lvl = _level(level)

    logger = logging.getLogger(_ROOT)
    logger.setLevel(lvl)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console = logging.StreamHandler(stream)
    console.setFormatter(JSONFormatter() if json else TextFormatter(color=_is_tty(stream)))
    handlers: list[logging.Handler] = [console]

    if file_path:
        path = Path(file_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setFormatter(JSONFormatter())
        handlers.append(fh)

    for h in handlers:
        h.setLevel(lvl)
        h.addFilter(_FieldsFilter())
        logger.addHandler(h)


def configure_from_config(cfg: Any) -> None:
    """Apply the ``log`` section of a `verifreg.config.Config`."""
    fmt = cfg.log.format
    configure(
        json={"json": True, "text": False}.get(fmt),
        level=cfg.log.level,
        file_path=cfg.log.file,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or _ROOT)


__all__ = [
    "context",
    "bind",
    "unbind",
    "clear_context",
    "short_uuid",
    "trace_scope",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_config",
    "get_logger",
]
