"""Port interfaces for the chesstrack application."""

from chesstrack.ports.callback_source import CallbackSource  # noqa: F401
from chesstrack.ports.cursor_store import CursorStore  # noqa: F401
from chesstrack.ports.error_reporter import ErrorReporter  # noqa: F401
from chesstrack.ports.repositories import (  # noqa: F401
    CallbackRepository,
    DailyRepository,
    DerivedRepository,
    GameRepository,
    GameStore,
)
from chesstrack.ports.unit_of_work import UnitOfWork  # noqa: F401
