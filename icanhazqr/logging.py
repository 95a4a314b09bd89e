"""icanhazqr structured logging: audit events and call tracing."""

import functools
import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone

ROOT_LOGGER = "icanhazqr"

# Custom AUDIT level (between WARNING=30 and ERROR=40)
AUDIT = 35
logging.addLevelName(AUDIT, "AUDIT")

_LEVELS = {"DEBUG", "INFO", "AUDIT", "WARNING", "ERROR", "CRITICAL"}


def _truncate(value: object, max_len: int = 80) -> str:
    """Truncate a value for safe logging."""
    s = str(value)
    if len(s) > max_len:
        return s[:max_len] + "..."
    return s


def _utc(created: float, fmt: str) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime(fmt)[:-3]


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record):
        entry = {
            "ts": _utc(record.created, "%Y-%m-%dT%H:%M:%S.%f") + "Z",
            "level": record.levelname,
            "src": record.name,
        }
        if hasattr(record, "event"):
            entry["event"] = record.event
        else:
            entry["msg"] = record.getMessage()
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = round(record.duration_ms, 2)
        if getattr(record, "ctx", None):
            entry["ctx"] = record.ctx
        if record.exc_info and record.exc_info[1]:
            entry["traceback"] = traceback.format_exception(*record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable colored console output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "AUDIT": "\033[35m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelname, "")
        parts = [
            _utc(record.created, "%H:%M:%S.%f"),
            f"{color}{record.levelname:5s}{self.RESET}",
            f"[{record.name}]",
        ]

        if hasattr(record, "event"):
            parts.append(record.event)
        else:
            parts.append(record.getMessage())

        if hasattr(record, "duration_ms"):
            parts.append(f"({record.duration_ms:.1f}ms)")

        ctx = getattr(record, "ctx", None)
        if ctx:
            parts.append(" ".join(f"{k}={_truncate(v)}" for k, v in ctx.items()))

        if record.exc_info and record.exc_info[1]:
            parts.append("\n" + "".join(traceback.format_exception(*record.exc_info)))

        return " ".join(parts)


def setup_logging(level: str = "INFO", log_file: str | None = None, json_format: bool = False):
    """Configure the root icanhazqr logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, AUDIT).
        log_file: If set, also write JSON logs to this path.
        json_format: Use JSON on the console as well.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.upper() if level.upper() in _LEVELS else logging.INFO)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter() if json_format else ConsoleFormatter())
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(JsonFormatter())
        root.addHandler(fh)


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger scoped under the icanhazqr namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{module_name}")


def _emit(log: logging.Logger, level: int, event: str, exc_info=None,
          duration_ms: float | None = None, **context):
    if not log.isEnabledFor(level):
        return
    record = log.makeRecord(
        name=log.name, level=level, fn="", lno=0,
        msg="", args=(), exc_info=exc_info,
    )
    record.event = event
    record.ctx = context
    if duration_ms is not None:
        record.duration_ms = duration_ms
    log.handle(record)


def audit(event: str, logger: logging.Logger | None = None, **context):
    """Emit an AUDIT-level structured log entry.

    Args:
        event: Machine-readable event tag (e.g. "qr.rendered").
        logger: Logger to use. Defaults to the icanhazqr root.
        **context: Key-value pairs for the event context.
    """
    _emit(logger or logging.getLogger(ROOT_LOGGER), AUDIT, event, **context)


def trace(func=None, *, logger_name: str | None = None, expected: tuple = ()):
    """Decorator that logs entry, exit and failures of a call with timing.

    - DEBUG on entry with (truncated) arguments
    - INFO on exit with duration and a result summary
    - WARNING for exceptions listed in ``expected``, without traceback
    - ERROR on any other exception with traceback and duration
    Exceptions are always re-raised.
    """
    def decorator(fn):
        log = get_logger(logger_name or fn.__module__.replace(f"{ROOT_LOGGER}.", ""))

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            fn_name = fn.__name__
            if log.isEnabledFor(logging.DEBUG):
                _emit(
                    log, logging.DEBUG, f"{fn_name}.enter",
                    args=[_truncate(repr(a)) for a in args],
                    kwargs={k: _truncate(repr(v)) for k, v in kwargs.items()},
                )

            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except expected as exc:
                _emit(
                    log, logging.WARNING, f"{fn_name}.failed",
                    duration_ms=(time.perf_counter() - start) * 1000,
                    function=fn_name, error=_truncate(exc),
                )
                raise
            except Exception:
                _emit(
                    log, logging.ERROR, f"{fn_name}.error",
                    exc_info=sys.exc_info(),
                    duration_ms=(time.perf_counter() - start) * 1000,
                    function=fn_name,
                )
                raise

            if isinstance(result, (bytes, str, list, tuple, dict)):
                summary = f"{type(result).__name__}[{len(result)}]"
            else:
                summary = type(result).__name__
            _emit(
                log, logging.INFO, f"{fn_name}.done",
                duration_ms=(time.perf_counter() - start) * 1000,
                result=summary,
            )
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
