from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from chesstrack.config import Settings
from chesstrack.chess_clients.chess_fetch_result import ChessFetchResult
from chesstrack.models.cursor import IngestionCursor
from chesstrack.utils.now import Now


@dataclass(slots=True)
class BaseChessClientContext:
    """Shared context for chess API clients.

    Attributes:
        settings: Application settings used for API calls.
        logger: Logger for client-specific messages.
        sleep: Called with ``settings.request_delay_s`` before each request.
        clock: Returns the current UTC time; decides the current-month archive.
    """

    settings: Settings
    logger: logging.Logger
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], datetime] = field(default=Now.as_datetime)


class BaseChessClient:
    """Base class for chess API clients.

    Subclasses are expected to implement `initial_sync` and `incremental_sync`.
    """

    def __init__(self, context: BaseChessClientContext) -> None:
        """Initialize the client with shared context.

        Args:
            context: Base context containing settings and logger.
        """

        self._context = context

    @property
    def settings(self) -> Settings:
        """Expose the settings from the context.

        Returns:
            The active `Settings` instance.
        """

        return self._context.settings

    @property
    def logger(self) -> logging.Logger:
        """Expose the logger from the context.

        Returns:
            Logger used by the client.
        """

        return self._context.logger

    def initial_sync(self) -> ChessFetchResult:
        """Fetch the full game history.

        Raises:
            NotImplementedError: When the subclass does not implement this method.
        """

        raise NotImplementedError("Subclasses must implement initial_sync")

    def incremental_sync(self, cursor: IngestionCursor) -> ChessFetchResult:
        """Fetch games newer than ``cursor``.

        Raises:
            NotImplementedError: When the subclass does not implement this method.
        """

        raise NotImplementedError("Subclasses must implement incremental_sync")

    def _now_utc(self) -> datetime:
        """Return the current UTC time from the context clock."""

        return self._context.clock()

    def _courtesy_pause(self) -> None:
        delay = max(self.settings.request_delay_s, 0.0)
        if delay:
            self._context.sleep(delay)
