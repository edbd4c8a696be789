"""Utility exports for the chesstrack package."""

from .logger import funclogger, get_logger, set_level
from .now import Now
from .to_int import to_float, to_int

__all__ = [
    "Now",
    "funclogger",
    "get_logger",
    "set_level",
    "to_float",
    "to_int",
]
