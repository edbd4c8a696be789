from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import requests

from chesstrack.chess_clients.base_chess_client import BaseChessClient, BaseChessClientContext
from chesstrack.chess_clients.chess_fetch_result import ArchiveFetch, ChessFetchResult
from chesstrack.errors import ArchiveFetchError
from chesstrack.models.cursor import IngestionCursor
from chesstrack.utils.now import Now
from chesstrack.utils.to_int import to_int

HTTP_STATUS_NOT_MODIFIED = 304

__all__ = [
    "HTTP_STATUS_NOT_MODIFIED",
    "ChesscomClient",
    "ChesscomClientContext",
    "same_archive",
]


@dataclass(slots=True)
class ChesscomClientContext(BaseChessClientContext):
    """Context for Chess.com API interactions."""


def same_archive(left: str | None, right: str | None) -> bool:
    """Compare archive URLs ignoring case and trailing slashes."""

    if not left or not right:
        return False
    return left.rstrip("/").lower() == right.rstrip("/").lower()


def _end_time(game: dict) -> int:
    return to_int(game.get("end_time")) or 0


class ChesscomClient(BaseChessClient):
    """Client for the Chess.com public archive API."""

    def __init__(self, context: ChesscomClientContext) -> None:
        """Initialize the client with Chess.com-specific context.

        Args:
            context: Client context containing settings and logger.
        """

        super().__init__(context)

    @property
    def archive_index_url(self) -> str:
        return self.settings.archives_url.format(username=self.settings.user.lower())

    def archive_url_for(self, year: int, month: int) -> str:
        """Return the monthly archive URL for ``year``/``month``."""

        base = self.archive_index_url.rstrip("/").rsplit("/", 1)[0]
        return f"{base}/{year:04d}/{month:02d}"

    def current_month_archive_url(self) -> str:
        now = self._now_utc()
        return self.archive_url_for(now.year, now.month)

    def fetch_archive_index(self) -> list[str]:
        """Fetch the list of monthly archive URLs, oldest first.

        Raises:
            ArchiveFetchError: On any non-success status.
        """

        url = self.archive_index_url
        payload = self._json(self._get(url), url)
        archives = [str(item) for item in payload.get("archives") or []]
        if not archives:
            self.logger.info("No archives returned for %s", self.settings.user)
        return archives

    def fetch_archive(self, url: str, etag: str | None = None) -> ArchiveFetch:
        """Fetch one monthly archive, optionally conditional on ``etag``.

        Args:
            url: Archive endpoint URL.
            etag: Token from a previous response; sent as ``If-None-Match``.

        Returns:
            The archive's games, or ``not_modified`` with no games on 304.

        Raises:
            ArchiveFetchError: On any status other than 2xx or 304.
        """

        response = self._get(url, etag=etag)
        if response.status_code == HTTP_STATUS_NOT_MODIFIED:
            self.logger.info("Archive unchanged: %s", url)
            return ArchiveFetch(url=url, etag=etag, not_modified=True)
        payload = self._json(response, url)
        games = [game for game in payload.get("games") or [] if isinstance(game, dict)]
        self.logger.debug("Fetched %s games from %s", len(games), url)
        return ArchiveFetch(url=url, games=games, etag=response.headers.get("ETag"))

    def initial_sync(self) -> ChessFetchResult:
        """Fetch every archive in order and return the full history.

        The returned cursor marks the newest game and ``full_sync_complete``.
        When the current month is among the archives its token is kept.
        """

        archives = self.fetch_archive_index()
        current = self.current_month_archive_url()
        games: list[dict] = []
        etag: str | None = None
        etag_archive: str | None = None
        for url in archives:
            fetched = self.fetch_archive(url)
            if same_archive(url, current) and fetched.etag:
                etag, etag_archive = fetched.etag, current
            games.extend(fetched.games)
        ordered = _dedupe_by_url(sorted(games, key=_end_time))
        last = ordered[-1] if ordered else None
        cursor = IngestionCursor(
            last_url=last.get("url") if last else None,
            last_end_time=_end_time(last) if last else None,
            etag=etag,
            etag_archive=etag_archive,
            full_sync_complete=True,
        )
        self.logger.info(
            "Initial sync fetched %s games from %s archives", len(ordered), len(archives)
        )
        return ChessFetchResult(games=ordered, cursor=cursor, archives_checked=list(archives))

    def incremental_sync(self, cursor: IngestionCursor) -> ChessFetchResult:
        """Fetch only games newer than ``cursor``.

        Checks the current month and, when the cursor sits in an earlier
        month, that month too. Each archive is walked newest to oldest until
        the cursor's game is met, which ends the whole scan.
        """

        now = self._now_utc()
        current = self.archive_url_for(now.year, now.month)
        archives = [current]
        last_seen = Now.from_epoch(cursor.last_end_time)
        if last_seen and (last_seen.year, last_seen.month) < (now.year, now.month):
            archives.append(self.archive_url_for(last_seen.year, last_seen.month))

        collected: list[dict] = []
        unchanged: list[str] = []
        etag, etag_archive = cursor.etag, cursor.etag_archive
        for url in archives:
            token = cursor.token_for(url) if url == current else None
            fetched = self.fetch_archive(url, etag=token)
            if url == current and fetched.etag and not fetched.not_modified:
                etag, etag_archive = fetched.etag, current
            if fetched.not_modified:
                unchanged.append(url)
                continue
            newer, reached = _take_until(fetched.games, cursor.last_url)
            collected.extend(newer)
            if reached:
                break

        ordered = _dedupe_by_url(sorted(collected, key=_end_time))
        next_cursor = _advance_cursor(cursor, ordered, etag, etag_archive)
        self.logger.info(
            "Incremental sync found %s new games (cursor %s -> %s)",
            len(ordered),
            cursor.last_url,
            next_cursor.last_url,
        )
        return ChessFetchResult(
            games=ordered,
            cursor=next_cursor,
            archives_checked=archives,
            not_modified=unchanged,
        )

    def fetch_callback(self, game_id: str, *, daily: bool = False) -> dict:
        """Fetch the callback payload for one game.

        Raises:
            ArchiveFetchError: On any non-success status.
        """

        url = self.settings.callback_url.format(
            kind="daily" if daily else "live", game_id=game_id
        )
        return self._json(self._get(url), url)

    def _get(self, url: str, etag: str | None = None) -> requests.Response:
        """Issue one GET after the courtesy pause.

        Raises:
            ArchiveFetchError: For anything other than 2xx or 304.
        """

        headers = dict(self.settings.headers)
        if etag:
            headers["If-None-Match"] = etag
        self._courtesy_pause()
        response = requests.get(url, headers=headers, timeout=self.settings.request_timeout_s)
        status = response.status_code
        if status == HTTP_STATUS_NOT_MODIFIED or 200 <= status < 300:  # noqa: PLR2004
            return response
        self.logger.error("Request failed with HTTP %s: %s", status, url)
        raise ArchiveFetchError(url, status, response=response)

    @staticmethod
    def _json(response: requests.Response, url: str) -> dict:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ArchiveFetchError(
                url, response.status_code, reason="invalid JSON body", response=response
            ) from exc
        if not isinstance(payload, dict):
            raise ArchiveFetchError(
                url, response.status_code, reason="unexpected payload", response=response
            )
        return payload


def _take_until(games: list[dict], last_url: str | None) -> tuple[list[dict], bool]:
    """Collect games newest first, stopping at ``last_url`` (exclusive).

    Returns:
        The newer games and whether the cursor game was reached.
    """

    if not last_url:
        return list(games), False
    newer: list[dict] = []
    for game in sorted(games, key=_end_time, reverse=True):
        if game.get("url") == last_url:
            return newer, True
        newer.append(game)
    return newer, False


def _dedupe_by_url(games: Iterable[dict]) -> list[dict]:
    seen: set[str] = set()
    unique: list[dict] = []
    for game in games:
        url = str(game.get("url") or "")
        if url and url in seen:
            continue
        seen.add(url)
        unique.append(game)
    return unique


def _advance_cursor(
    cursor: IngestionCursor,
    games: list[dict],
    etag: str | None,
    etag_archive: str | None,
) -> IngestionCursor:
    updates: dict[str, object] = {"etag": etag, "etag_archive": etag_archive}
    if games:
        last = games[-1]
        updates["last_url"] = last.get("url")
        updates["last_end_time"] = _end_time(last)
    return cursor.model_copy(update=updates)
