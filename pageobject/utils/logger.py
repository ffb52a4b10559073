# pageobject/utils/logger.py
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, MutableMapping, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from pageobject.utils.config import LogLevel, Settings, get_settings


__all__ = [
    "ContextAdapter",
    "JsonFormatter",
    "get_logger",
    "set_log_level",
    "bind",
    "unbind",
    "log_with_context",
    "reset_logging",
]

PACKAGE_LOGGER = "pageobject"

_lock = threading.Lock()
_handlers_installed = False
# bound with bind(); every adapter reads it at emit time
_bound_context: Dict[str, Any] = {}


class JsonFormatter(logging.Formatter):
    """Log file lines: one JSON document per record, bound context merged in."""

    def format(self, record: logging.LogRecord) -> str:
        doc: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            doc.update(context)
        if record.exc_info:
            doc["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(doc, ensure_ascii=False, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """
    Attaches the bound context plus this adapter's own keys to each record
    as `record.context` (picked up by JsonFormatter).
    """

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(logger, {})
        self.context: Dict[str, Any] = dict(context or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        merged = {**_bound_context, **self.context}
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**merged, **extra.get("context", {})}
        kwargs["extra"] = extra
        return msg, kwargs


def _level_of(level: LogLevel | str) -> int:
    name = level.value if isinstance(level, LogLevel) else str(level).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _console_handler(settings: Settings, level: int) -> logging.Handler:
    console = Console(stderr=True, no_color=not settings.COLORIZED_OUTPUT)
    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        omit_repeated_times=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)
    return handler


def _file_handler(settings: Settings, level: int) -> logging.Handler:
    settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        settings.LOG_FILE,
        maxBytes=2 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(JsonFormatter())
    handler.setLevel(level)
    return handler


def _install_handlers() -> None:
    """Attach handlers to the `pageobject` logger on first use; the root logger is left alone."""
    global _handlers_installed
    if _handlers_installed:
        return
    with _lock:
        if _handlers_installed:
            return
        settings = get_settings()
        level = _level_of(settings.LOG_LEVEL)

        pkg = logging.getLogger(PACKAGE_LOGGER)
        pkg.setLevel(level)
        pkg.handlers.clear()
        pkg.addHandler(_console_handler(settings, level))
        if settings.LOG_TO_FILE:
            pkg.addHandler(_file_handler(settings, level))
        _handlers_installed = True


def reset_logging() -> None:
    """Close and drop the package handlers; the next get_logger() re-reads settings."""
    global _handlers_installed
    with _lock:
        pkg = logging.getLogger(PACKAGE_LOGGER)
        for handler in list(pkg.handlers):
            pkg.removeHandler(handler)
            handler.close()
        _handlers_installed = False


def get_logger(name: Optional[str] = None) -> ContextAdapter:
    _install_handlers()
    return ContextAdapter(logging.getLogger(name or PACKAGE_LOGGER))


def set_log_level(level: LogLevel | str) -> None:
    _install_handlers()
    py_level = _level_of(level)
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(py_level)
    for handler in pkg.handlers:
        handler.setLevel(py_level)


def bind(**context: Any) -> None:
    """Add keys (page="LoginPage", test="test_login", ...) to every later record."""
    _bound_context.update(context)


def unbind(*keys: str) -> None:
    for key in keys:
        _bound_context.pop(key, None)


def log_with_context(logger: logging.LoggerAdapter, **context: Any) -> ContextAdapter:
    """
    One-off adapter carrying extra keys:

        log_with_context(log, command="click").debug("dispatching")
    """
    base = dict(getattr(logger, "context", {}) or {})
    base.update(context)
    return ContextAdapter(logger.logger, base)
