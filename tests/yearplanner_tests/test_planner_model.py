"""Tests for the planner data model and the YearPlanner collection."""

import dataclasses
import datetime as _dt
import unittest

from tests.fixtures import d, make_event, make_pattern
from yearplanner.errors import EventOutOfYearError
from yearplanner.model import EventInstance, RecurrencePattern, YearPlanner, instance_id


class TestEvent(unittest.TestCase):

    def test_inverted_range_is_swapped(self):
        ev = make_event("x", "2025-03-10", "2025-03-05")
        self.assertEqual(ev.start_date, d("2025-03-05"))
        self.assertEqual(ev.end_date, d("2025-03-10"))
        self.assertEqual(ev.duration, 6)

    def test_inverted_range_swaps_times_too(self):
        ev = make_event("x", "2025-03-10T17:00:00", "2025-03-05T09:00:00")
        self.assertEqual(ev.start_date, d("2025-03-05"))
        self.assertEqual(ev.start_time, _dt.time(9, 0))
        self.assertEqual(ev.end_time, _dt.time(17, 0))

    def test_datetime_input_keeps_time_of_day(self):
        ev = make_event("x", "2025-01-15T09:30:00", "2025-01-15T10:00:00")
        self.assertEqual(ev.start_date, d("2025-01-15"))
        self.assertEqual(ev.start_time, _dt.time(9, 30))
        self.assertEqual(ev.end_time, _dt.time(10, 0))

    def test_events_are_immutable(self):
        ev = make_event("x", "2025-01-15")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            ev.title = "changed"  # type: ignore[misc]

    def test_overlaps(self):
        ev = make_event("x", "2025-08-05", "2025-08-07")
        self.assertTrue(ev.overlaps(d("2025-08-07"), d("2025-08-09")))
        self.assertFalse(ev.overlaps(d("2025-08-08"), d("2025-08-09")))

    def test_instance_defaults(self):
        inst = EventInstance(id="a_2025-01-01", title="a", start_date=d("2025-01-01"), end_date=d("2025-01-01"))
        self.assertTrue(inst.is_recurrence_instance)
        self.assertFalse(inst.is_recurring)

    def test_instance_id(self):
        self.assertEqual(instance_id("tpl", d("2025-01-15")), "tpl_2025-01-15")


class TestRecurrencePattern(unittest.TestCase):

    def test_validity(self):
        self.assertTrue(make_pattern("weekly").is_valid)
        self.assertTrue(make_pattern("annual", interval=2).is_valid)
        self.assertFalse(RecurrencePattern(type="daily").is_valid)
        self.assertFalse(RecurrencePattern(type="").is_valid)
        self.assertFalse(RecurrencePattern(type="weekly", interval=0).is_valid)
        self.assertFalse(RecurrencePattern(type="weekly", interval="2").is_valid)  # type: ignore[arg-type]
        self.assertTrue(make_pattern("monthly", month_overflow="skip").is_valid)
        self.assertFalse(make_pattern("monthly", month_overflow="sometimes").is_valid)

    def test_allows_respects_exclusions_and_end(self):
        p = make_pattern("weekly", exclusions=["2025-02-05"], end_date="2025-03-01")
        self.assertFalse(p.allows(d("2025-02-05")))
        self.assertTrue(p.allows(d("2025-02-12")))
        self.assertTrue(p.allows(d("2025-03-01")))
        self.assertFalse(p.allows(d("2025-03-02")))

    def test_fingerprint_ignores_exclusion_order(self):
        a = make_pattern("weekly", exclusions=["2025-02-05", "2025-01-01"])
        b = make_pattern("weekly", exclusions=["2025-01-01", "2025-02-05"])
        self.assertEqual(a.fingerprint(), b.fingerprint())
        self.assertNotEqual(make_pattern("monthly").fingerprint(), make_pattern("monthly", month_overflow="skip").fingerprint())


class TestYearPlanner(unittest.TestCase):

    def setUp(self):
        self.planner = YearPlanner(2025)

    def test_add_and_get(self):
        self.planner.add_event(make_event("a", "2025-05-01"))
        self.assertEqual(self.planner.get_event("a").title, "a")
        self.assertIsNone(self.planner.get_event("missing"))

    def test_add_outside_year_is_rejected(self):
        with self.assertRaises(EventOutOfYearError):
            self.planner.add_event(make_event("old", "2024-05-01"))

    def test_event_crossing_into_year_is_accepted(self):
        self.planner.add_event(make_event("nye", "2024-12-30", "2025-01-02"))
        self.assertEqual(len(self.planner.events), 1)

    def test_events_returns_a_copy(self):
        self.planner.add_event(make_event("a", "2025-05-01"))
        self.planner.events.clear()
        self.assertEqual(len(self.planner.events), 1)

    def test_remove(self):
        self.planner.add_event(make_event("a", "2025-05-01"))
        self.assertTrue(self.planner.remove_event("a"))
        self.assertFalse(self.planner.remove_event("a"))

    def test_update_keeps_id(self):
        self.planner.add_event(make_event("a", "2025-05-01"))
        self.assertTrue(self.planner.update_event("a", title="Renamed", id="other"))
        ev = self.planner.get_event("a")
        self.assertEqual(ev.title, "Renamed")
        self.assertFalse(self.planner.update_event("missing", title="x"))

    def test_update_out_of_year_is_rejected(self):
        self.planner.add_event(make_event("a", "2025-05-01"))
        with self.assertRaises(EventOutOfYearError):
            self.planner.update_event("a", start_date=d("2026-01-02"), end_date=d("2026-01-03"))
        self.assertEqual(self.planner.get_event("a").start_date, d("2025-05-01"))

    def test_events_in_month(self):
        self.planner.add_event(make_event("jan", "2025-01-10"))
        self.planner.add_event(make_event("span", "2025-01-30", "2025-02-02"))
        self.planner.add_event(make_event("mar", "2025-03-01"))
        self.assertEqual([e.id for e in self.planner.events_in_month(0)], ["jan", "span"])
        self.assertEqual([e.id for e in self.planner.events_in_month(1)], ["span"])
        with self.assertRaises(ValueError):
            self.planner.events_in_month(12)

    def test_clear(self):
        self.planner.add_event(make_event("a", "2025-05-01"))
        self.planner.clear()
        self.assertEqual(self.planner.events, [])


if __name__ == "__main__":
    unittest.main()
