"""
CryptoLab Structured Logger
============================

:class:`LabLogger` binds a stdlib logger to one CryptoLab component
(``engine``, ``cli``, ``metrics``) and stamps every record with that
component, the operation in progress (``encrypt``, ``analyze``) and any
keyword context passed at the call site::

    log.warning("Key rejected", cipher="hill", determinant=13)

Records go to stderr through Rich, so that stdout stays clean for JSON
reports and piped cipher output, and optionally to a rotating file as
plain text or JSON lines.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich logging handler. https://rich.readthedocs.io/en/stable/logging.html
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

_LOGGER_PREFIX = "cryptolab"
_PASSTHROUGH_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel"})

_STDERR_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s [%(operation)s] | %(message)s"


def _parse_level(level: str | int) -> int:
    """Map ``"debug"``/``"INFO"``/``20`` to a logging level, defaulting to INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record, for the rotating log file.

    Example line::

        {"timestamp": "2024-05-01T10:00:00+00:00", "level": "WARNING",
         "logger": "cryptolab.engine", "component": "engine",
         "operation": "encrypt", "message": "encrypt failed: ...",
         "context": {"cipher": "hill"}}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": getattr(record, "component", None),
            "operation": getattr(record, "operation", None),
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _stderr_handler(level: int) -> RichHandler:
    handler = RichHandler(
        console=Console(theme=_STDERR_THEME, stderr=True),
        level=level,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(
    path: Path, level: int, json_logs: bool, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(
        _JsonLineFormatter()
        if json_logs
        else logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    )
    return handler


class LabLogger:
    """Component-bound logger with operation scoping and keyword context.

    Usage::

        log = LabLogger("engine", log_file="output/cryptolab.log", json_logs=True)
        with log.operation("encrypt"):
            log.info("Running %s", "vigenere", key_length=5)
        with log.timed("friedman test"):
            ...

    Creating a second logger for the same component replaces the first
    one's handlers rather than stacking them.

    Args:
        component:      Component name; the stdlib logger is ``cryptolab.<component>``.
        log_level:      Minimum level name or number.
        log_file:       Rotating log file, or ``None`` for stderr only.
        json_logs:      Write the file as JSON lines instead of text.
        max_bytes:      File size that triggers rotation.
        backup_count:   Rotated files to keep.
        console_output: Attach the Rich stderr handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str | int = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._operation: str | None = None

        level = _parse_level(log_level)
        self._logger = logging.getLogger(f"{_LOGGER_PREFIX}.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        if console_output:
            self._logger.addHandler(_stderr_handler(level))
        if log_file is not None:
            self._logger.addHandler(
                _file_handler(Path(log_file), level, json_logs, max_bytes, backup_count)
            )

    # ------------------------------------------------------------------ #
    #  Scopes
    # ------------------------------------------------------------------ #

    @contextmanager
    def operation(self, name: str) -> Iterator[LabLogger]:
        """Tag every record inside the block with ``operation=name``.

        Scopes nest; the outer operation is restored on exit.
        """
        outer, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = outer

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log *label* at DEBUG with its wall-clock duration when the block ends."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.debug(
                "%s took %.3f ms", label, (time.perf_counter() - start) * 1000.0
            )

    # ------------------------------------------------------------------ #
    #  Logging
    # ------------------------------------------------------------------ #

    def _log(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        passthrough = {k: kwargs.pop(k) for k in list(kwargs) if k in _PASSTHROUGH_KWARGS}
        passthrough.setdefault("stacklevel", 3)
        extra = {
            "component": self._component,
            "operation": self._operation or "-",
            "context": kwargs,
        }
        self._logger.log(level, msg, *args, extra=extra, **passthrough)

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._log(logging.DEBUG, msg, args, context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._log(logging.INFO, msg, args, context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._log(logging.WARNING, msg, args, context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._log(logging.ERROR, msg, args, context)

    def exception(self, msg: str, *args: Any, **context: Any) -> None:
        """ERROR with the active exception's traceback attached."""
        context.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, context)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def component(self) -> str:
        return self._component

    @property
    def operation_name(self) -> str | None:
        """Operation currently in scope, if any."""
        return self._operation

    @property
    def underlying(self) -> logging.Logger:
        """The wrapped :class:`logging.Logger`."""
        return self._logger
