from chesstrack.errors import IngestionIssue, IssueKind
from chesstrack.infra.cursor_store import FileCursorStore
from chesstrack.infra.error_reporter import LoggingErrorReporter
from chesstrack.models.cursor import IngestionCursor


def test_missing_file_reads_empty_cursor(tmp_path) -> None:
    store = FileCursorStore(tmp_path / "cursor.json")
    assert store.read() == IngestionCursor()


def test_write_then_read(tmp_path) -> None:
    store = FileCursorStore(tmp_path / "state" / "cursor.json")
    cursor = IngestionCursor(
        last_url="https://www.chess.com/game/live/1",
        last_end_time=1700000000,
        etag="abc",
        etag_archive="https://api.chess.com/pub/player/alice/games/2024/03",
        full_sync_complete=True,
    )

    store.write(cursor)

    assert store.read() == cursor
    assert not (tmp_path / "state" / "cursor.json.tmp").exists()


def test_unreadable_file_reads_empty_cursor(tmp_path) -> None:
    path = tmp_path / "cursor.json"
    path.write_text("{not json", encoding="utf-8")
    assert FileCursorStore(path).read() == IngestionCursor()


def test_token_belongs_to_one_archive() -> None:
    cursor = IngestionCursor(etag="abc", etag_archive="https://x/2024/03")
    assert cursor.token_for("https://x/2024/03") == "abc"
    assert cursor.token_for("https://x/2024/02") is None


def test_logging_reporter_collects_issues() -> None:
    reporter = LoggingErrorReporter()
    reporter.report_issue(IssueKind.VALIDATION, "missing end time", game_id="1")
    reporter.report_issue(IssueKind.TRANSPORT, "HTTP 500", game_id="2")
    reporter.report_issue(IssueKind.VALIDATION, "missing players")

    assert reporter.counts() == {"validation": 2, "transport": 1}
    assert reporter.issues[0] == IngestionIssue(IssueKind.VALIDATION, "missing end time", game_id="1")
    assert reporter.issues[1].as_dict()["kind"] == "transport"
