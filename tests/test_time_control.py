import unittest

from chesstrack.time_control import (
    TimeControlKind,
    TimeControlSpec,
    game_format,
    parse_time_control,
)


class ParseTimeControlTests(unittest.TestCase):
    def test_increment_descriptor_is_live(self) -> None:
        spec = parse_time_control("180+2")
        self.assertEqual(spec.kind, TimeControlKind.LIVE)
        self.assertEqual(spec.base_seconds, 180)
        self.assertEqual(spec.increment_seconds, 2)
        self.assertIsNone(spec.correspondence_seconds)

    def test_slash_descriptor_is_daily(self) -> None:
        spec = parse_time_control("1/86400")
        self.assertTrue(spec.is_daily)
        self.assertEqual(spec.correspondence_seconds, 86400)
        self.assertIsNone(spec.base_seconds)
        self.assertIsNone(spec.increment_seconds)

    def test_bare_integer_has_no_increment(self) -> None:
        spec = parse_time_control("600")
        self.assertEqual(spec.kind, TimeControlKind.LIVE)
        self.assertEqual(spec.base_seconds, 600)
        self.assertEqual(spec.increment_seconds, 0)

    def test_unparseable_fragments_become_none(self) -> None:
        cases = {
            "abc+2": (None, 2),
            "180+x": (180, None),
            "blitz": (None, 0),
        }
        for descriptor, (base, increment) in cases.items():
            with self.subTest(descriptor=descriptor):
                spec = parse_time_control(descriptor)
                self.assertEqual(spec.base_seconds, base)
                self.assertEqual(spec.increment_seconds, increment)
        self.assertIsNone(parse_time_control("1/soon").correspondence_seconds)

    def test_slash_takes_priority_over_plus(self) -> None:
        spec = parse_time_control("1/3600+5")
        self.assertTrue(spec.is_daily)
        self.assertIsNone(spec.correspondence_seconds)

    def test_empty_descriptor_uses_time_class(self) -> None:
        self.assertEqual(
            parse_time_control(None, "daily"), TimeControlSpec(kind=TimeControlKind.DAILY)
        )
        self.assertEqual(parse_time_control("", "blitz"), TimeControlSpec(kind=TimeControlKind.LIVE))

    def test_as_str_round_trips_descriptor(self) -> None:
        for descriptor in ("180+2", "600", "1/86400"):
            with self.subTest(descriptor=descriptor):
                self.assertEqual(str(parse_time_control(descriptor)), descriptor)


class GameFormatTests(unittest.TestCase):
    def test_standard_rules_use_time_class(self) -> None:
        self.assertEqual(game_format("blitz", "chess"), "blitz")
        self.assertEqual(game_format("Rapid", None), "rapid")

    def test_variants_are_suffixed(self) -> None:
        self.assertEqual(game_format("daily", "chess960"), "daily960")
        self.assertEqual(game_format("blitz", "bughouse"), "blitzbughouse")

    def test_missing_time_class(self) -> None:
        self.assertEqual(game_format(None, "chess"), "unknown")


if __name__ == "__main__":
    unittest.main()
