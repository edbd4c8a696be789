from datetime import UTC, date, datetime

import pytest

from chesstrack.db.duckdb_store import DuckDbStore, get_connection, open_store
from chesstrack.config import Settings
from chesstrack.infra.unit_of_work import unit_of_work
from chesstrack.models.rows import CallbackRow, DailyStatRow, DerivedRow, GameRow


@pytest.fixture
def store(tmp_path):
    store = DuckDbStore.from_connection(get_connection(tmp_path / "store.duckdb"))
    yield store
    store.close()


def _game_row(game_id: str, day: int = 10, rating: int | None = 1500) -> GameRow:
    return GameRow(
        game_id=game_id,
        url=f"https://www.chess.com/game/live/{game_id}",
        end_date=date(2024, 3, day),
        end_time_of_day="12:00:00",
        end_timestamp=int(datetime(2024, 3, day, 12, tzinfo=UTC).timestamp()),
        my_color="white",
        opponent="bob",
        outcome="win",
        termination="resigned",
        format="blitz",
        my_rating=rating,
        opp_rating=1400,
    )


def _derived_row(game_id: str, duration: float | None = 120.0) -> DerivedRow:
    return DerivedRow(
        game_id=game_id,
        url=f"https://www.chess.com/game/live/{game_id}",
        format="blitz",
        match=None,
        start_time=datetime(2024, 3, 10, 11, 58, tzinfo=UTC),
        end_time=datetime(2024, 3, 10, 12, 0, tzinfo=UTC),
        played_as="white",
        my_username="alice",
        opp_username="bob",
        moves=["e4", "e5"],
        clocks=[179.9, 178.0],
        time_spent=[2.1, 4.0],
        ply_count=2,
        moves_count=1,
        duration_seconds=duration,
    )


def test_games_keep_insertion_order_and_row_ids(store) -> None:
    store.games.append([_game_row("b"), _game_row("a")])
    store.games.append([_game_row("c")])

    rows = list(store.games.scan())
    assert [row.game_id for row in rows] == ["b", "a", "c"]
    assert [row.row_id for row in rows] == [1, 2, 3]
    assert store.games.game_ids() == {"a", "b", "c"}
    assert store.games.find_by_id("a").end_date == date(2024, 3, 10)
    assert store.games.find_by_id("missing") is None


def test_games_remove_duplicates_keeps_first(store) -> None:
    store.games.append([_game_row("a", rating=1500), _game_row("b"), _game_row("a", rating=1600)])

    assert store.games.remove_duplicates() == 1
    rows = list(store.games.scan())
    assert [row.game_id for row in rows] == ["a", "b"]
    assert rows[0].my_rating == 1500
    assert store.games.remove_duplicates() == 0


def test_update_markers(store) -> None:
    store.games.append([_game_row("a"), _game_row("b")])

    assert store.games.update_markers(["a", "zzz"], analyzed=True) == 1
    assert store.games.update_markers(["b"]) == 0
    rows = {row.game_id: row for row in store.games.scan()}
    assert rows["a"].analyzed is True
    assert rows["b"].analyzed is False
    assert rows["a"].callback_fetched is False


def test_derived_rows_keep_lists_and_utc_times(store) -> None:
    store.derived.append([_derived_row("a"), _derived_row("b", duration=None)])

    row = store.derived.find_by_id("a")
    assert row is not None
    assert row.moves == ["e4", "e5"]
    assert row.clocks == [179.9, 178.0]
    assert row.time_spent == [2.1, 4.0]
    assert row.end_time == datetime(2024, 3, 10, 12, 0, tzinfo=UTC)
    assert store.derived.durations() == {"a": 120.0, "b": None}


def test_derived_rows_accept_empty_lists(store) -> None:
    empty = _derived_row("a").model_copy(update={"moves": [], "clocks": [], "time_spent": []})
    store.derived.append([empty])
    assert store.derived.find_by_id("a").moves == []


def test_daily_rows(store) -> None:
    store.daily.append(
        [
            DailyStatRow(date=date(2024, 3, 1), format="blitz", wins=1, losses=0, draws=0, rating=1500),
            DailyStatRow(date=date(2024, 3, 2), format="blitz", rating=1500),
            DailyStatRow(date=date(2024, 3, 2), format="bullet"),
        ]
    )

    assert store.daily.last_date() == date(2024, 3, 2)
    assert [row.format for row in store.daily.rows_for_date(date(2024, 3, 2))] == ["blitz", "bullet"]
    assert len(store.daily.between(start=date(2024, 3, 2))) == 2
    assert len(list(store.daily.scan())) == 3


def test_daily_clear(store) -> None:
    store.daily.append(
        [
            DailyStatRow(date=date(2024, 3, 1), format="blitz"),
            DailyStatRow(date=date(2024, 3, 2), format="blitz"),
            DailyStatRow(date=date(2024, 3, 3), format="blitz"),
        ]
    )

    assert store.daily.clear(since=date(2024, 3, 2)) == 2
    assert store.daily.last_date() == date(2024, 3, 1)
    assert store.daily.clear() == 1
    assert list(store.daily.scan()) == []


def test_unit_of_work_rolls_back_every_collection(store) -> None:
    with pytest.raises(ValueError):
        with unit_of_work(store):
            store.games.append([_game_row("a")])
            store.daily.append([DailyStatRow(date=date(2024, 3, 1), format="blitz")])
            raise ValueError("abort")

    assert list(store.games.scan()) == []
    assert store.daily.last_date() is None

    with unit_of_work(store):
        store.games.append([_game_row("a")])

    assert store.games.game_ids() == {"a"}


def test_daily_last_date_empty(store) -> None:
    assert store.daily.last_date() is None


def test_callback_rows(store) -> None:
    fetched_at = datetime(2024, 3, 11, tzinfo=UTC)
    store.callbacks.append(
        [CallbackRow(game_id="a", my_rating_change=8, opp_country="Norway", fetched_at=fetched_at)]
    )

    row = store.callbacks.find_by_id("a")
    assert row is not None
    assert row.my_rating_change == 8
    assert row.fetched_at == fetched_at
    assert store.callbacks.find_by_id("b") is None


def test_open_store_uses_settings_path(tmp_path) -> None:
    settings = Settings(data_dir=tmp_path, duckdb_path=tmp_path / "nested" / "x.duckdb")
    with open_store(settings) as store:
        store.games.append([_game_row("a")])
    assert (tmp_path / "nested" / "x.duckdb").exists()
