import logging
import unittest
from pathlib import Path

import pytest

from chesstrack.config import DEFAULT_FORMATS, Settings, get_settings
from chesstrack.utils.logger import funclogger, get_logger, set_level
from chesstrack.utils.now import Now
from chesstrack.utils.to_int import to_float, to_int


def test_settings_read_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("CHESSTRACK_USER", "Alice")
    monkeypatch.setenv("CHESSTRACK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CHESSTRACK_FORMATS", "Blitz, rapid,,")
    monkeypatch.setenv("CHESSTRACK_REQUEST_DELAY_S", "not-a-number")
    monkeypatch.setenv("CHESSTRACK_REQUEST_TIMEOUT_S", "7.5")
    monkeypatch.delenv("CHESSTRACK_DUCKDB_PATH", raising=False)
    monkeypatch.delenv("CHESSTRACK_CURSOR_PATH", raising=False)

    settings = Settings()

    assert settings.user == "Alice"
    assert settings.tracked_formats == ("blitz", "rapid")
    assert settings.request_delay_s == 1.0
    assert settings.request_timeout_s == 7.5
    assert settings.duckdb_path == tmp_path / "chesstrack.duckdb"
    assert settings.cursor_path == tmp_path / "cursor.json"


def test_empty_formats_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("CHESSTRACK_FORMATS", " , ")
    assert Settings().tracked_formats == DEFAULT_FORMATS


def test_get_settings_applies_overrides_and_creates_dirs(tmp_path) -> None:
    data_dir = tmp_path / "nested" / "data"

    settings = get_settings(data_dir=data_dir, user="bob")

    assert settings.user == "bob"
    assert data_dir.is_dir()
    assert isinstance(settings.cursor_path, Path)


def test_get_settings_rejects_unknown_fields(tmp_path) -> None:
    with pytest.raises(TypeError, match="unexpected keyword argument 'colour'"):
        get_settings(data_dir=tmp_path, colour="white")


def test_get_settings_requires_a_user(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv("CHESSTRACK_USER", raising=False)
    monkeypatch.delenv("CHESSCOM_USERNAME", raising=False)

    assert Settings(data_dir=tmp_path).user == ""
    with pytest.raises(ValueError, match="CHESSTRACK_USER"):
        get_settings(data_dir=tmp_path)
    assert get_settings(data_dir=tmp_path, user="alice").user == "alice"


def test_unknown_timezone_falls_back_to_utc(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, timezone="Mars/Olympus_Mons")
    assert settings.tzinfo.key == "UTC"


def test_headers_include_contact_email(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, user_agent="tracker/1", contact_email="me@example.com")
    assert settings.headers["User-Agent"] == "tracker/1 (me@example.com)"
    assert settings.headers["Accept"] == "application/json"


class CoercionTests(unittest.TestCase):
    def test_to_int(self) -> None:
        self.assertEqual(to_int(" 42 "), 42)
        self.assertEqual(to_int(3.0), 3)
        self.assertIsNone(to_int(3.5))
        self.assertIsNone(to_int("abc"))
        self.assertIsNone(to_int(None))

    def test_to_float(self) -> None:
        self.assertEqual(to_float("2.5"), 2.5)
        self.assertEqual(to_float(4), 4.0)
        self.assertIsNone(to_float(True))
        self.assertIsNone(to_float("x"))

    def test_from_epoch(self) -> None:
        self.assertEqual(Now.from_epoch(0).year, 1970)
        self.assertIsNone(Now.from_epoch(None))


class LoggerTests(unittest.TestCase):
    def tearDown(self) -> None:
        set_level("INFO")

    def test_get_logger_namespaces_names(self) -> None:
        self.assertEqual(get_logger("issues").name, "chesstrack.issues")
        self.assertEqual(get_logger("chesstrack.pipeline").name, "chesstrack.pipeline")
        self.assertEqual(get_logger().name, "chesstrack")

    def test_set_level_accepts_names(self) -> None:
        set_level("debug", ["chesstrack"])
        self.assertEqual(logging.getLogger("chesstrack").level, logging.DEBUG)
        set_level("bogus", ["chesstrack"])
        self.assertEqual(logging.getLogger("chesstrack").level, logging.INFO)

    def test_funclogger_traces_at_debug(self) -> None:
        @funclogger
        def add(left, right):
            return left + right

        set_level("DEBUG", ["chesstrack"])
        with self.assertLogs("chesstrack", level="DEBUG") as captured:
            self.assertEqual(add(2, right=3), 5)

        self.assertEqual(add.__name__, "add")
        self.assertTrue(any("Finished" in line for line in captured.output))
