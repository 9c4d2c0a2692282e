"""
nftpermit — logging
-------------------

Structured logging on top of the stdlib `logging` module:
- JSON or concise colored text formats
- Context-local fields via `contextvars` (trace_id, chain_id, component, ...)
- Safe JSON serialization (bytes → hex, dataclasses → dict)

Library modules just use `logging.getLogger(__name__)`; only entry points (the
CLI, an embedding service) call `configure()` once at start-up.

Usage
-----
    from nftpermit import logging as plog

    plog.configure(json=False, level="INFO")
    log = plog.get_logger(__name__)

    with plog.trace_scope():
        plog.bind(component="cli")
        log.info("digest computed", extra={"asset_id": 0})
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import threading
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Optional

# ----------------------------
# Context
# ----------------------------

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_NFTPERMIT_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("trace_id", "chain_id", "component", "asset_id")

# LogRecord attributes that are never treated as structured extras.
_RESERVED = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    """Merge fields into the active context."""
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


@contextmanager
def trace_scope(trace_id: Optional[str] = None):
    """
    Ensure a trace_id is present for the duration of the scope.
    Restores prior context on exit.
    """
    prev = dict(_LOG_CONTEXT.get())
    try:
        bind(trace_id=trace_id or short_uuid())
        yield
    finally:
        _LOG_CONTEXT.set(prev)


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


# ----------------------------
# Formatters
# ----------------------------


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    if is_dataclass(v) and not isinstance(v, type):
        return asdict(v)
    return str(v)


_LEVEL_TO_INT = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in record.__dict__.items():
        if k.startswith("_") or k in _RESERVED:
            continue
        out[k] = _coerce_value(v)
    return out


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
            "tid": threading.get_ident(),
        }
        payload.update({k: _coerce_value(v) for k, v in context().items()})
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | INFO  | nftpermit.cli | trace_id=abc123 | digest computed
    """

    _COLORS = {
        logging.DEBUG: "\x1b[90m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1m\x1b[35m",
    }
    _RESET = "\x1b[0m"

    def __init__(self, stream: io.TextIOBase):
        super().__init__()
        self._color = _supports_color(stream)

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        ctx_str = " ".join(f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items() if k not in ctx)

        lvl = f"{record.levelname:<5}"
        if self._color:
            lvl = f"{self._COLORS.get(record.levelno, '')}{lvl}{self._RESET}"

        line = f"{_utcnow_iso()} | {lvl} | {record.name}"
        if ctx_str:
            line += f" | {ctx_str}"
        if extras:
            line += f" {extras}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


def _supports_color(stream: Any) -> bool:
    try:
        return stream.isatty() and os.environ.get("NO_COLOR") is None
    except Exception:
        return False


# ----------------------------
# Public setup API
# ----------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: Any = None,
) -> None:
    """
    Configure the `nftpermit` logger tree (not the root logger, so embedding
    applications keep control of their own handlers).

    json=None picks JSON when NFTPERMIT_LOG_FORMAT=json or the stream is not a TTY.
    """
    stream = stream if stream is not None else sys.stderr
    chosen_json = _decide_json(json, stream)

    logger = logging.getLogger("nftpermit")
    logger.setLevel(_coerce_level(level))
    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(_coerce_level(level))
    handler.setFormatter(JSONFormatter() if chosen_json else TextFormatter(stream))
    logger.addHandler(handler)
    logger.propagate = False


def configure_from_config(cfg: Any, *, stream: Any = None) -> None:
    """Configure from a `nftpermit.config.PermitConfig`."""
    bind(chain_id=cfg.domain_settings.chain_id)
    configure(json=cfg.logging.json, level=cfg.logging.level, stream=stream)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "nftpermit")


# ----------------------------
# Internals
# ----------------------------


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return _LEVEL_TO_INT.get(level.upper(), logging.INFO)


def _decide_json(json_flag: Optional[bool], stream: Any) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get("NFTPERMIT_LOG_FORMAT", "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    return not _supports_color(stream)


__all__ = [
    "bind",
    "clear_context",
    "configure",
    "configure_from_config",
    "context",
    "get_logger",
    "JSONFormatter",
    "short_uuid",
    "TextFormatter",
    "trace_scope",
    "unbind",
]
