from __future__ import annotations

import unittest
from datetime import date
from datetime import datetime
from datetime import timezone
from zoneinfo import ZoneInfo

from misc.week_clock import current_week_number
from misc.week_clock import day_name
from misc.week_clock import display_week_number
from misc.week_clock import iso_week_number
from misc.week_clock import now_in_zone
from misc.week_clock import resolve_timezone
from misc.week_clock import week_key

PARIS = ZoneInfo("Europe/Paris")


class IsoWeekTests(unittest.TestCase):
    def test_new_year_saturday_belongs_to_previous_year(self):
        self.assertEqual(iso_week_number(date(2022, 1, 1)), 52)

    def test_year_with_53_weeks(self):
        # 2021-01-01 is a Friday, still week 53 of 2020.
        self.assertEqual(iso_week_number(date(2021, 1, 1)), 53)

    def test_first_thursday_week_is_week_one(self):
        self.assertEqual(iso_week_number(date(2026, 1, 1)), 1)  # Thursday
        self.assertEqual(iso_week_number(datetime(2024, 12, 30, 9, 0, tzinfo=PARIS)), 1)


class ZonedClockTests(unittest.TestCase):
    def test_now_in_zone_uses_target_zone_not_host(self):
        instant = datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc)
        local = now_in_zone("Europe/Paris", instant)
        self.assertEqual((local.year, local.month, local.day, local.hour, local.minute), (2024, 1, 2, 0, 30))

    def test_now_in_zone_rejects_naive_datetime(self):
        with self.assertRaises(ValueError):
            now_in_zone("Europe/Paris", datetime(2024, 1, 1, 12, 0))

    def test_unknown_timezone_raises(self):
        with self.assertRaises(ValueError):
            resolve_timezone("Mars/Olympus")
        with self.assertRaises(ValueError):
            resolve_timezone("")

    def test_current_week_rolls_at_local_midnight(self):
        # Sunday 23:30 UTC is already Monday 00:30 in Paris (winter).
        instant = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
        self.assertEqual(current_week_number("UTC", instant), 10)
        self.assertEqual(current_week_number("Europe/Paris", instant), 11)

    def test_week_key_uses_calendar_year(self):
        instant = datetime(2024, 12, 30, 12, 0, tzinfo=timezone.utc)
        self.assertEqual(week_key("Europe/Paris", instant), "2024-W1")
        self.assertEqual(week_key("Europe/Paris", datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)), "2024-W10")

    def test_day_name(self):
        self.assertEqual(day_name("Europe/Paris", datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)), "Sunday")


class DisplayWeekTests(unittest.TestCase):
    def test_sunday_shows_previous_week(self):
        sunday = datetime(2024, 3, 10, 12, 0, tzinfo=PARIS)
        self.assertEqual(iso_week_number(sunday), 10)
        self.assertEqual(display_week_number(sunday), 9)

    def test_sunday_roll_back_can_be_disabled(self):
        sunday = datetime(2024, 3, 10, 12, 0, tzinfo=PARIS)
        self.assertEqual(display_week_number(sunday, sunday_rolls_back=False), 10)

    def test_weekday_is_unchanged(self):
        monday = datetime(2024, 3, 11, 0, 0, tzinfo=PARIS)
        self.assertEqual(display_week_number(monday), 11)

    def test_sunday_of_week_one_wraps_to_last_week_of_previous_year(self):
        sunday = datetime(2024, 1, 7, 12, 0, tzinfo=PARIS)
        self.assertEqual(iso_week_number(sunday), 1)
        self.assertEqual(display_week_number(sunday), 52)


if __name__ == "__main__":
    unittest.main()
