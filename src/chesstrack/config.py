from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATA_DIR = "data"
DEFAULT_FORMATS = ("bullet", "blitz", "rapid", "daily")
DEFAULT_USER_AGENT = "chesstrack/0.1 (personal game history sync)"


def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_optional_str(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_formats() -> tuple[str, ...]:
    raw = os.getenv("CHESSTRACK_FORMATS")
    if not raw:
        return DEFAULT_FORMATS
    formats = tuple(part.strip().lower() for part in raw.split(",") if part.strip())
    return formats or DEFAULT_FORMATS


def _env_optional_path(name: str) -> Path | None:
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else None


@dataclass(slots=True)
class Settings:
    """Central configuration threaded into every sync, ingestion, and aggregation call."""

    user: str = field(
        default_factory=lambda: _env_str(
            "CHESSTRACK_USER", os.getenv("CHESSCOM_USERNAME", "")
        )
    )
    api_token: str = field(
        default_factory=lambda: _env_str("CHESSTRACK_API_TOKEN", "local-dev-token")
    )
    data_dir: Path = field(
        default_factory=lambda: Path(_env_str("CHESSTRACK_DATA_DIR", DEFAULT_DATA_DIR))
    )
    duckdb_path: Path | None = field(
        default_factory=lambda: _env_optional_path("CHESSTRACK_DUCKDB_PATH")
    )
    cursor_path: Path | None = field(
        default_factory=lambda: _env_optional_path("CHESSTRACK_CURSOR_PATH")
    )
    archives_url: str = field(
        default_factory=lambda: _env_str(
            "CHESSTRACK_ARCHIVES_URL",
            "https://api.chess.com/pub/player/{username}/games/archives",
        )
    )
    callback_url: str = field(
        default_factory=lambda: _env_str(
            "CHESSTRACK_CALLBACK_URL",
            "https://www.chess.com/callback/{kind}/game/{game_id}",
        )
    )
    request_delay_s: float = field(
        default_factory=lambda: _env_float("CHESSTRACK_REQUEST_DELAY_S", 1.0)
    )
    # None leaves requests at its transport default.
    request_timeout_s: float | None = field(
        default_factory=lambda: _env_optional_float("CHESSTRACK_REQUEST_TIMEOUT_S")
    )
    user_agent: str = field(
        default_factory=lambda: _env_str("CHESSTRACK_USER_AGENT", DEFAULT_USER_AGENT)
    )
    timezone: str = field(default_factory=lambda: _env_str("CHESSTRACK_TIMEZONE", "UTC"))
    tracked_formats: tuple[str, ...] = field(default_factory=_env_formats)
    callback_batch_size: int = field(
        default_factory=lambda: _env_int("CHESSTRACK_CALLBACK_BATCH_SIZE", 50)
    )
    log_level: str = field(default_factory=lambda: _env_str("CHESSTRACK_LOG_LEVEL", "INFO"))
    contact_email: str | None = field(
        default_factory=lambda: _env_optional_str("CHESSTRACK_CONTACT_EMAIL")
    )

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        if self.duckdb_path is None:
            self.duckdb_path = self.data_dir / "chesstrack.duckdb"
        if self.cursor_path is None:
            self.cursor_path = self.data_dir / "cursor.json"
        self.duckdb_path = Path(self.duckdb_path)
        self.cursor_path = Path(self.cursor_path)
        self.tracked_formats = tuple(fmt.lower() for fmt in self.tracked_formats)

    @property
    def tzinfo(self) -> ZoneInfo:
        """Zone used to turn game end instants into calendar dates."""
        try:
            return ZoneInfo(self.timezone or "UTC")
        except (ZoneInfoNotFoundError, ValueError):
            return ZoneInfo("UTC")

    @property
    def headers(self) -> dict[str, str]:
        agent = self.user_agent
        if self.contact_email:
            agent = f"{agent} ({self.contact_email})"
        return {"User-Agent": agent, "Accept": "application/json"}

    def ensure_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if self.duckdb_path is not None:
            self.duckdb_path.parent.mkdir(parents=True, exist_ok=True)
        if self.cursor_path is not None:
            self.cursor_path.parent.mkdir(parents=True, exist_ok=True)


def _raise_on_unexpected_kwargs(kwargs: dict[str, object]) -> None:
    known = {f.name for f in fields(Settings)}
    unexpected = [name for name in kwargs if name not in known]
    if unexpected:
        raise TypeError(f"get_settings() got an unexpected keyword argument '{unexpected[0]}'")


def get_settings(**overrides: object) -> Settings:
    """Build settings from the environment (and ``.env``), then apply overrides.

    Raises:
        TypeError: An override names no settings field.
        ValueError: No user is configured.
    """
    load_dotenv()
    _raise_on_unexpected_kwargs(overrides)
    settings = Settings(**overrides)  # type: ignore[arg-type]
    if not settings.user:
        raise ValueError("No Chess.com user configured; set CHESSTRACK_USER")
    settings.ensure_dirs()
    return settings
