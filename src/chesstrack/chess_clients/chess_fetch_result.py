from __future__ import annotations

from pydantic import BaseModel, Field

from chesstrack.models.cursor import IngestionCursor


class ArchiveFetch(BaseModel):
    """One monthly archive response.

    Attributes:
        url: Archive endpoint URL.
        games: Raw game payloads in archive order.
        etag: Change token returned by the server, if any.
        not_modified: True when the server answered 304.
    """

    url: str
    games: list[dict] = Field(default_factory=list)
    etag: str | None = None
    not_modified: bool = False


class ChessFetchResult(BaseModel):
    """Games fetched by one sync plus the cursor to persist afterwards.

    Attributes:
        games: Raw game payloads ordered by ascending end time.
        cursor: Cursor describing the newest game seen.
        archives_checked: Archive URLs requested during the sync.
        not_modified: Archive URLs the server reported unchanged.

    Example:
        >>> ChessFetchResult(games=[], cursor=IngestionCursor())
    """

    games: list[dict] = Field(default_factory=list)
    cursor: IngestionCursor = Field(default_factory=IngestionCursor)
    archives_checked: list[str] = Field(default_factory=list)
    not_modified: list[str] = Field(default_factory=list)
