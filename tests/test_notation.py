import unittest

from chesstrack.notation import (
    MIN_TIME_SPENT_SECONDS,
    clock_to_seconds,
    count_plies,
    extract_move_data,
    read_pgn_headers,
)
from tests.game_fixtures import BLITZ_PGN, DAILY_PGN, NO_CLOCK_PGN


class ClockToSecondsTests(unittest.TestCase):
    def test_clock_formats(self) -> None:
        cases = {
            "0:02:59.9": 179.9,
            "1:00:00": 3600.0,
            "05:30": 330.0,
            "42": 42.0,
            "0:x:10": 10.0,
            "1:02:00:00": 93600.0,
        }
        for token, expected in cases.items():
            with self.subTest(token=token):
                self.assertAlmostEqual(clock_to_seconds(token), expected)


class ExtractMoveDataTests(unittest.TestCase):
    def test_live_game_time_spent_alternates_players(self) -> None:
        data = extract_move_data(BLITZ_PGN, 180, 2)

        self.assertEqual(data.moves, ("e4", "e5", "Nf3", "Nc6", "Bb5"))
        self.assertEqual(len(data.clocks), 5)
        self.assertAlmostEqual(data.clocks[0], 179.9)
        expected = [2.1, 4.0, 4.4, 10.0, 4.5]
        for actual, wanted in zip(data.time_spent, expected, strict=True):
            self.assertAlmostEqual(actual, wanted, places=3)
        self.assertEqual(data.ply_count, 5)
        self.assertEqual(data.moves_count, 3)
        self.assertEqual(data.eco, "C20")
        self.assertEqual(data.duration_seconds, 330.0)

    def test_sequences_match_ply_count(self) -> None:
        data = extract_move_data(BLITZ_PGN, 180, 2)
        n = len(data.moves)
        self.assertEqual(len(data.clocks), n)
        self.assertEqual(len(data.time_spent), n)
        self.assertEqual(data.ply_count, n)

    def test_time_spent_is_floored(self) -> None:
        pgn = "1. e4 {[%clk 0:03:00]} 1... e5 {[%clk 0:03:05]}"
        data = extract_move_data(pgn, 180, 0)
        self.assertEqual(data.time_spent, (MIN_TIME_SPENT_SECONDS, MIN_TIME_SPENT_SECONDS))

    def test_daily_game_resets_budget_each_move(self) -> None:
        data = extract_move_data(DAILY_PGN, 86400, 0, resets_each_move=True)
        self.assertEqual(data.moves, ("e4", "d5", "exd5"))
        self.assertEqual(data.time_spent, (3600.0, 43200.0, MIN_TIME_SPENT_SECONDS))
        self.assertEqual(data.duration_seconds, 172800.0)

    def test_missing_base_uses_first_clock(self) -> None:
        data = extract_move_data(BLITZ_PGN, None, 2)
        self.assertEqual(data.time_spent[0], 2.0)
        self.assertEqual(data.time_spent[1], 2.0)
        self.assertAlmostEqual(data.time_spent[2], 4.4, places=3)

    def test_text_without_clocks_degrades(self) -> None:
        data = extract_move_data(NO_CLOCK_PGN, 180, 0)
        self.assertEqual(data.moves, ())
        self.assertEqual(data.clocks, ())
        self.assertEqual(data.time_spent, ())
        self.assertEqual(data.ply_count, 3)
        self.assertIsNone(data.duration_seconds)

    def test_garbage_never_raises(self) -> None:
        for text in (None, "", "not a pgn at all {", '[Event "x"'):
            with self.subTest(text=text):
                data = extract_move_data(text, 60, 0)
                self.assertEqual(data.moves, ())
                self.assertIsNone(data.duration_seconds)

    def test_castling_and_promotion_are_recognized(self) -> None:
        pgn = "1. O-O {[%clk 0:01:00]} 1... O-O-O {[%clk 0:01:00]} 2. e8=Q+ {[%clk 0:00:59]}"
        data = extract_move_data(pgn, 60, 0)
        self.assertEqual(data.moves, ("O-O", "O-O-O", "e8=Q+"))

    def test_negative_duration_is_unknown(self) -> None:
        pgn = (
            '[UTCDate "2024.03.10"]\n[UTCTime "12:00:00"]\n'
            '[EndDate "2024.03.09"]\n[EndTime "12:00:00"]\n\n1. e4 1-0\n'
        )
        self.assertIsNone(extract_move_data(pgn, 60, 0).duration_seconds)


class PgnHelpersTests(unittest.TestCase):
    def test_count_plies_ignores_comments_and_variations(self) -> None:
        movetext = "1. e4 {best by test} (1. d4 d5) 1... e5 $1 2. Nf3 *"
        self.assertEqual(count_plies(movetext), 3)

    def test_read_pgn_headers(self) -> None:
        headers = read_pgn_headers(BLITZ_PGN)
        self.assertEqual(headers.get("White"), "alice")
        self.assertEqual(read_pgn_headers("1. e4 e5"), {})


if __name__ == "__main__":
    unittest.main()
