"""Data models shared across fetch, ingestion, and aggregation."""

from chesstrack.models.cursor import IngestionCursor
from chesstrack.models.move_data import DerivedMoveData
from chesstrack.models.normalized_game import NormalizedGame
from chesstrack.models.raw_game import RawGame, RawPlayer, game_id_from_url
from chesstrack.models.rows import CallbackRow, DailyStatRow, DerivedRow, GameRow

__all__ = [
    "CallbackRow",
    "DailyStatRow",
    "DerivedMoveData",
    "DerivedRow",
    "GameRow",
    "IngestionCursor",
    "NormalizedGame",
    "RawGame",
    "RawPlayer",
    "game_id_from_url",
]
