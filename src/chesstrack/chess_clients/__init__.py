"""Public exports for chess client abstractions."""

from __future__ import annotations

from chesstrack.chess_clients.base_chess_client import BaseChessClient, BaseChessClientContext
from chesstrack.chess_clients.chess_fetch_result import ArchiveFetch, ChessFetchResult
from chesstrack.chess_clients.chesscom_client import ChesscomClient, ChesscomClientContext

__all__ = [
    "ArchiveFetch",
    "BaseChessClient",
    "BaseChessClientContext",
    "ChessFetchResult",
    "ChesscomClient",
    "ChesscomClientContext",
]
