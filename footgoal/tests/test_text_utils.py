import datetime as dt
import unittest
from pathlib import Path
import sys

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = TESTS_DIR.parent.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from footgoal.text_utils import (
    canonical_day_key,
    clean_category_name,
    format_day_label,
    format_time_until,
    parse_iso_datetime,
    parse_time_to_minutes,
    split_match_title,
    to_local_clock,
)


class StartsInFormatTests(unittest.TestCase):
    def test_under_an_hour_is_minutes_only(self):
        self.assertEqual(format_time_until(45), "45min")

    def test_hours_and_minutes(self):
        self.assertEqual(format_time_until(90), "1h 30min")

    def test_whole_hours_drop_minutes(self):
        self.assertEqual(format_time_until(120), "2h")

    def test_rounding_carries_into_hours(self):
        self.assertEqual(format_time_until(119.7), "2h")

    def test_rounding_up_to_an_hour(self):
        self.assertEqual(format_time_until(59.7), "1h")
        self.assertEqual(format_time_until(59.4), "59min")


class ClockParsingTests(unittest.TestCase):
    def test_valid_times(self):
        self.assertEqual(parse_time_to_minutes("14:45"), 885)
        self.assertEqual(parse_time_to_minutes("9:05"), 545)
        self.assertEqual(parse_time_to_minutes(" 00:00 "), 0)

    def test_invalid_times(self):
        self.assertIsNone(parse_time_to_minutes("25:00"))
        self.assertIsNone(parse_time_to_minutes("12:60"))
        self.assertIsNone(parse_time_to_minutes("TBD"))
        self.assertIsNone(parse_time_to_minutes(None))


class CategoryAndTitleTests(unittest.TestCase):
    def test_clean_category_strips_digits_and_punctuation(self):
        self.assertEqual(clean_category_name("Football 2"), "Football")
        self.assertEqual(clean_category_name("Soccer!!"), "Soccer")
        self.assertEqual(clean_category_name("UEFA Champions League"), "UEFA Champions League")

    def test_split_on_vs(self):
        self.assertEqual(
            split_match_title("Arsenal vs Manchester City"),
            {"team1": "Arsenal", "team2": "Manchester City"},
        )

    def test_split_on_other_separators(self):
        self.assertEqual(split_match_title("Lyon - PSG"), {"team1": "Lyon", "team2": "PSG"})
        self.assertEqual(split_match_title("Celtic v Rangers"), {"team1": "Celtic", "team2": "Rangers"})
        self.assertEqual(split_match_title("Roma vs. Lazio"), {"team1": "Roma", "team2": "Lazio"})

    def test_unsplittable_title(self):
        self.assertIsNone(split_match_title("Formula 1 Qualifying"))
        self.assertIsNone(split_match_title(""))


class DayKeyTests(unittest.TestCase):
    def test_iso_and_label_forms_share_a_key(self):
        self.assertEqual(canonical_day_key("2026-10-18"), "2026-10-18")
        self.assertEqual(canonical_day_key("Sunday, 18 October 2026"), "2026-10-18")

    def test_unknown_label_is_kept(self):
        self.assertEqual(canonical_day_key("  Today  "), "Today")

    def test_display_label(self):
        self.assertEqual(format_day_label("2026-10-18"), "Sunday, 18 October 2026")
        self.assertEqual(format_day_label("Today"), "Today")


class DateTimeTests(unittest.TestCase):
    def test_parse_iso_with_z_suffix(self):
        parsed = parse_iso_datetime("2026-10-18T14:30:00Z")
        self.assertEqual(parsed, dt.datetime(2026, 10, 18, 14, 30, tzinfo=dt.timezone.utc))
        self.assertIsNone(parse_iso_datetime("not a date"))

    def test_local_clock_follows_reference_timezone(self):
        kickoff = dt.datetime(2026, 10, 18, 14, 30, tzinfo=dt.timezone.utc)
        now = dt.datetime(2026, 10, 18, 12, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
        self.assertEqual(to_local_clock(kickoff, now), "16:30")

    def test_naive_moment_is_taken_as_is(self):
        self.assertEqual(to_local_clock(dt.datetime(2026, 10, 18, 7, 5)), "07:05")


if __name__ == "__main__":
    unittest.main()
