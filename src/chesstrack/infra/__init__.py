"""Default adapters for the chesstrack ports."""

from chesstrack.infra.cursor_store import FileCursorStore
from chesstrack.infra.error_reporter import LoggingErrorReporter
from chesstrack.infra.unit_of_work import unit_of_work

__all__ = ["FileCursorStore", "LoggingErrorReporter", "unit_of_work"]
