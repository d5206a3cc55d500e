"""Structured logging utilities for the streaming client.

Rationale:
- One place configures JSON (or plain) logging for every module.
- Stream events are emitted as single-line JSON payloads through
  ``log_event`` so they can be grepped and aggregated.

``normalized_log_event`` wraps ``log_event`` and guarantees the canonical keys
``phase``, ``attempt``, ``emitted`` and ``error_code`` (the latter only when an
error is present) across all stream lifecycle events.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext


BASE_LOGGER_NAME = "advisor_stream"
LOG_LEVEL_ENV = "ADVISOR_STREAM_LOG_LEVEL"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_BASE_LOGGER_ATTR = "_advisor_stream_initialized"
_CONSOLE_HANDLER_ATTR = "_advisor_stream_console_handler"
_FILE_HANDLER_ATTR = "_advisor_stream_file_handler"


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a logging level name into an integer constant.

    Accepts DEBUG, INFO, WARN/WARNING, ERROR and CRITICAL case-insensitively;
    falls back to ``default`` on unknown values.
    """
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize and return the shared ``advisor_stream`` logger.

    The console handler writes to the *current* ``sys.stderr`` so that test
    capture (which swaps the stream) keeps working across calls.
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    desired_level = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        logger.setLevel(desired_level)
        for existing in logger.handlers:
            if not getattr(existing, _CONSOLE_HANDLER_ATTR, False):
                continue
            existing.setLevel(desired_level)
            # direct assignment: setStream would flush a possibly closed stream
            if getattr(existing, "stream", None) is not sys.stderr:
                existing.stream = sys.stderr  # type: ignore[attr-defined]
            if json_mode != isinstance(existing.formatter, JsonFormatter):
                existing.setFormatter(_make_formatter(json_mode))
        return logger

    logger.setLevel(desired_level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(desired_level)
    handler.setFormatter(_make_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return a logger wired to the shared base handler.

    Child loggers (``advisor_stream.*``) carry no handler of their own and
    propagate to the base logger, which avoids duplicate lines.
    """
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired logging level (number or name). ``None`` keeps the current level.
    file_path: Optional[str]
        When provided, attach (or retarget) a rotating file handler writing to
        this path. When ``None``, remove any file handler managed here.
    json_mode: bool
        JSON formatter (default) or plain text for the file handler.

    Returns
    -------
    logging.Logger
        The configured base logger. Handlers not created by this module are
        left untouched.
    """
    logger = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level) if isinstance(level, str) else level)
        for h in logger.handlers:
            h.setLevel(logger.level)

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in managed:
        if abs_path is not None and getattr(h, "baseFilename", None) == abs_path:
            h.setFormatter(_make_formatter(json_mode))
            h.setLevel(logger.level)
            continue
        logger.removeHandler(h)
        h.close()
    if abs_path is None or any(getattr(h, "baseFilename", None) == abs_path for h in logger.handlers):
        return logger

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    # 10MB x 5 backups
    fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(fh, _FILE_HANDLER_ATTR, True)
    fh.setLevel(logger.level)
    fh.setFormatter(_make_formatter(json_mode))
    logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured log event as a single JSON line.

    Parameters
    ----------
    logger: logging.Logger
        Logger obtained from ``get_logger``.
    event: str
        Event name (e.g. ``stream.start``).
    ctx: LogContext | None
        Stream context merged shallowly into the payload.
    level: int
        Logging level for the record (INFO by default).
    keep_none: bool
        Preserve keys whose value is ``None`` (encoded as JSON ``null``).
    **fields: Any
        Arbitrary serializable key/value pairs.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "phase",
    "attempt",
    "error_code",
    "emitted",
)


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a stream lifecycle event with the normalized key set.

    ``error_code`` is omitted when ``None``; the other required keys are
    always present. ``extra_fields`` never overwrite a normalized value.
    """
    base_fields: Dict[str, Any] = {
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "BASE_LOGGER_NAME",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
