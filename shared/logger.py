"""
KeyForge Structured Logger
===========================

Every component logs through a :class:`ForgeLogger` bound to a component
name (``generator``, ``dictionary``, ``backend`` ...). All of them are
children of the single ``keyforge`` logger, which :func:`configure_logging`
equips once per process from the ``[global]`` configuration section:

* a Rich console handler on stderr, so stdout stays clean for JSON output;
* optionally a rotating file, written as plain lines or JSON lines.

Secrets never reach a handler. Keyword context whose name looks like a
secret (``secret``, ``password``, ``passphrase``, ``candidate``) is
replaced with a redaction marker before the record is built, so callers
may log ``length=...`` or ``estimator=...`` but never the value under
evaluation.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
    - OWASP Logging Cheat Sheet -- data to exclude.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER = "keyforge"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)

_REDACTED_KEYS: frozenset[str] = frozenset(
    {"secret", "password", "passphrase", "candidate"}
)
_REDACTION_MARKER = "<redacted>"

_PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.WARNING)


# ========================== Formatters =====================================


class _JSONLineFormatter(logging.Formatter):
    """One JSON object per record.

    ``{"timestamp", "level", "component", "operation"?, "message",
    "context"?, "exc_info"?}``
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "message": record.getMessage(),
        }
        operation = getattr(record, "operation", None)
        if operation is not None:
            entry["operation"] = operation
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _ComponentDefaults(logging.Filter):
    """Fill ``component`` for records that bypassed :class:`ForgeLogger`."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name
        return True


# ========================== Setup ==========================================


def configure_logging(
    level: str = "WARNING",
    *,
    log_file: str | Path | None = None,
    json_logs: bool = False,
    console_output: bool = True,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> logging.Logger:
    """(Re)install the handlers of the ``keyforge`` logger.

    Safe to call repeatedly; previous handlers are closed and replaced.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_level(level))
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console_output:
        root.addHandler(
            RichHandler(
                console=Console(theme=_LOG_THEME, stderr=True),
                show_path=False,
                rich_tracebacks=True,
                markup=False,
            )
        )

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        fh.addFilter(_ComponentDefaults())
        fh.setFormatter(
            _JSONLineFormatter()
            if json_logs
            else logging.Formatter(_PLAIN_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
        )
        root.addHandler(fh)

    return root


# ========================== ForgeLogger ====================================


class ForgeLogger:
    """Component logger with redacted keyword context.

    Usage::

        log = ForgeLogger("backend")
        with log.operation("fetch"):
            log.info("Helper finished", length=len(secret), password=secret)
            # -> context {"length": 10, "password": "<redacted>"}
    """

    def __init__(self, component: str) -> None:
        self._component = component
        self._operation: str | None = None
        self._logger = logging.getLogger(f"{ROOT_LOGGER}.{component}")

        if not logging.getLogger(ROOT_LOGGER).handlers:
            configure_logging()

    @contextmanager
    def operation(self, name: str) -> Iterator[ForgeLogger]:
        """Tag every record emitted inside the block with *name*."""
        previous, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = previous

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log how long the block took, at INFO."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.info("Completed: %s (%.3f sec)", label, time.perf_counter() - start)

    def _extra(self, context: dict[str, Any]) -> dict[str, Any]:
        redacted = {
            key: _REDACTION_MARKER if key.lower() in _REDACTED_KEYS else value
            for key, value in context.items()
        }
        return {
            "component": self._component,
            "operation": self._operation,
            "context": redacted,
        }

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._logger.debug(msg, *args, extra=self._extra(context))

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._logger.info(msg, *args, extra=self._extra(context))

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._logger.warning(msg, *args, extra=self._extra(context))

    def exception(self, msg: str, *args: Any, **context: Any) -> None:
        """ERROR with the active exception's traceback."""
        self._logger.error(msg, *args, exc_info=True, extra=self._extra(context))
