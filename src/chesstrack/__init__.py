"""Incremental Chess.com game history sync, clock analytics, and daily stats."""

__version__ = "0.1.0"
