"""Tests for yearplanner/dates.py calendar arithmetic."""

import datetime as _dt
import unittest

from yearplanner.dates import (
    clamp_day,
    clip_range,
    days_in_month,
    inclusive_days,
    is_leap_year,
    time_of_day,
    to_calendar_day,
    year_bounds,
)


class TestMonthArithmetic(unittest.TestCase):

    def test_year_bounds(self):
        self.assertEqual(year_bounds(2025), (_dt.date(2025, 1, 1), _dt.date(2025, 12, 31)))

    def test_leap_years(self):
        self.assertTrue(is_leap_year(2024))
        self.assertTrue(is_leap_year(2000))
        self.assertFalse(is_leap_year(1900))
        self.assertFalse(is_leap_year(2025))

    def test_days_in_february(self):
        self.assertEqual(days_in_month(2024, 2), 29)
        self.assertEqual(days_in_month(2025, 2), 28)

    def test_clamp_day_pulls_back_to_month_end(self):
        self.assertEqual(clamp_day(2025, 2, 31), _dt.date(2025, 2, 28))
        self.assertEqual(clamp_day(2024, 2, 30), _dt.date(2024, 2, 29))
        self.assertEqual(clamp_day(2025, 4, 31), _dt.date(2025, 4, 30))
        self.assertEqual(clamp_day(2025, 5, 31), _dt.date(2025, 5, 31))

    def test_inclusive_days(self):
        self.assertEqual(inclusive_days(_dt.date(2025, 8, 5), _dt.date(2025, 8, 7)), 3)
        self.assertEqual(inclusive_days(_dt.date(2025, 8, 5), _dt.date(2025, 8, 5)), 1)

    def test_clip_range(self):
        lo, hi = year_bounds(2025)
        self.assertEqual(
            clip_range(_dt.date(2024, 12, 30), _dt.date(2025, 1, 2), lo, hi),
            (_dt.date(2025, 1, 1), _dt.date(2025, 1, 2)),
        )
        self.assertIsNone(clip_range(_dt.date(2024, 3, 1), _dt.date(2024, 3, 2), lo, hi))


class TestCalendarDayNormalization(unittest.TestCase):

    def test_datetime_keeps_wall_clock_date(self):
        aware = _dt.datetime(2025, 3, 30, 23, 30, tzinfo=_dt.timezone(_dt.timedelta(hours=-5)))
        self.assertEqual(to_calendar_day(aware), _dt.date(2025, 3, 30))

    def test_iso_string_with_zone_suffix(self):
        self.assertEqual(to_calendar_day("2025-01-15T00:00:00.000Z"), _dt.date(2025, 1, 15))
        self.assertEqual(to_calendar_day(" 2025-01-15 "), _dt.date(2025, 1, 15))

    def test_empty_value_raises(self):
        with self.assertRaises(ValueError):
            to_calendar_day("")
        with self.assertRaises(ValueError):
            to_calendar_day("15/01/2025")

    def test_time_of_day(self):
        self.assertEqual(time_of_day("2025-01-15T09:30:00.000Z"), _dt.time(9, 30))
        self.assertEqual(time_of_day("2025-01-15 18:05"), _dt.time(18, 5))
        self.assertEqual(time_of_day("2025-01-15T07:00:00+02:00"), _dt.time(7, 0))
        self.assertEqual(time_of_day(_dt.datetime(2025, 1, 15, 14, 0)), _dt.time(14, 0))

    def test_no_time_for_plain_dates(self):
        self.assertIsNone(time_of_day("2025-01-15"))
        self.assertIsNone(time_of_day(_dt.date(2025, 1, 15)))
        self.assertIsNone(time_of_day(None))


if __name__ == "__main__":
    unittest.main()
