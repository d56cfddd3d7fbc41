"""Call logging for the provider clients and the answering pipeline."""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_LOG_DIR = os.getenv("LOG_DIR") or os.path.join(os.getcwd(), "logs")
_LOG_FILE = os.path.join(_LOG_DIR, "api_calls.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO", log_dir: str | None = None) -> logging.Logger:
    """Attach a console handler to the package logger (idempotent).

    ``log_dir`` relocates the call log if it has not been opened yet.
    """
    global _LOG_DIR, _LOG_FILE
    if log_dir and _logger is None:
        _LOG_DIR = log_dir
        _LOG_FILE = os.path.join(log_dir, "api_calls.log")
    logger = logging.getLogger("weatheradvisor")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def _get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        _logger = logging.getLogger("weatheradvisor.api")
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False

        if not _logger.handlers:
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            _logger.addHandler(handler)

    return _logger


def _arg_summary(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # skip 'self'
    arg_parts = [repr(a) for a in args[1:]]
    arg_parts += [f"{k}={v!r}" for k, v in kwargs.items()]
    return ", ".join(arg_parts)


# Provider payload keys whose list lengths describe a response.
_COUNTED_KEYS = ("results", "daily", "hourly", "alerts", "list", "data")


def summarize_result(result: Any) -> str:
    """Describe a call result in a few words for the OK line.

    Lists report their length, provider payloads the lengths of their
    list-valued sections (``"7 daily, 24 hourly"``), and pipeline answers
    their intent and source.
    """
    if isinstance(result, list):
        return f"{len(result)} items"
    if isinstance(result, dict):
        counts = [
            f"{len(result[key])} {key}" for key in _COUNTED_KEYS
            if isinstance(result.get(key), list)
        ]
        return ", ".join(counts) if counts else f"{len(result)} keys"
    intent, source = getattr(result, "intent", None), getattr(result, "source", None)
    if source is not None:
        return f"intent={getattr(intent, 'value', intent)}, source={source}"
    return type(result).__name__


def _logged(fn: F, tag: str) -> F:
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        call = f"{fn.__qualname__}({_arg_summary(args, kwargs)})"
        logger.info("%sCALL: %s", tag, call)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            logger.error(
                "%sFAIL: %s -> %s: %s (%.3fs)",
                tag, call, type(exc).__name__, exc, time.monotonic() - start,
            )
            raise
        logger.info(
            "%sOK: %s -> %s (%.3fs)", tag, call, summarize_result(result), time.monotonic() - start,
        )
        return result

    return wrapper  # type: ignore[return-value]


def log_api_call(fn: F) -> F:
    """Decorator logging provider calls as CALL/OK/FAIL lines."""
    return _logged(fn, "")


def log_service_call(fn: F) -> F:
    """Decorator logging pipeline stages as SERVICE CALL/OK/FAIL lines."""
    return _logged(fn, "SERVICE ")
