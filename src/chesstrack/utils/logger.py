"""Logger configuration and convenience helpers."""

from __future__ import annotations

import logging
import sys
import time
from functools import wraps

_ROOT_LOGGER_NAME = "chesstrack"
_DEFAULT_LOG_LEVEL = logging.INFO
_FORMATTER = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_FORMATTER)
    return handler


_HANDLER = _build_handler()


def _configure_root(level: int) -> logging.Logger:
    """Attach the stdout handler to the package root logger once.

    Child loggers (``chesstrack.pipeline`` and friends) propagate to it; the
    package root itself does not propagate.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if root.level == logging.NOTSET:
        root.setLevel(level)
    if not root.handlers:
        root.addHandler(_HANDLER)
    root.propagate = False
    return root


def get_logger(name: str | None = None, level: int = _DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Return a logger under the ``chesstrack`` namespace."""
    _configure_root(level)
    logger_name = name or _ROOT_LOGGER_NAME
    if logger_name != _ROOT_LOGGER_NAME and not logger_name.startswith(f"{_ROOT_LOGGER_NAME}."):
        logger_name = f"{_ROOT_LOGGER_NAME}.{logger_name}"
    return logging.getLogger(logger_name)


def set_level(level: int | str, logger_names: list[str] | None = None) -> None:
    """Set the log level for one or more logger names."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = _DEFAULT_LOG_LEVEL
    names = logger_names or [_ROOT_LOGGER_NAME, "uvicorn"]
    for name in names:
        logging.getLogger(name).setLevel(level)


def funclogger(func):
    """Decorator that traces calls to ``func`` at DEBUG level.

    Logs the qualified name, positional and keyword arguments, elapsed time,
    and return value.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        function_path = f"{func.__module__}.{func.__qualname__}".replace("<", "").replace(">", "")
        logger = get_logger(function_path)
        if not logger.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)
        for i, arg in enumerate(args):
            logger.debug("arg %s: %r (%s)", i, arg, type(arg).__name__)
        for key, value in kwargs.items():
            logger.debug("kwarg %s: %r (%s)", key, value, type(value).__name__)
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        logger.debug(
            "Finished %s in %.4f seconds -> %r",
            func.__qualname__,
            time.perf_counter() - start_time,
            result,
        )
        return result

    return wrapper
