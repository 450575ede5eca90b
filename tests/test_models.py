"""Tests for the models module."""

import datetime
import unittest

from prayertime.errors import ParseError
from prayertime.models import (
    CachedSnapshot,
    Coordinates,
    DailyTimings,
    PrayerName,
    date_key,
    parse_hhmm,
)


class TestModels(unittest.TestCase):
    def test_date_key_is_not_zero_padded(self):
        self.assertEqual(date_key(datetime.date(2025, 3, 5)), "5-3-2025")
        self.assertEqual(date_key(datetime.date(2026, 10, 19)), "19-10-2026")

    def test_parse_hhmm(self):
        self.assertEqual(parse_hhmm("04:30"), datetime.time(4, 30))
        self.assertEqual(parse_hhmm("18:05 (EET)"), datetime.time(18, 5))
        with self.assertRaises(ValueError):
            parse_hhmm("25:00")
        with self.assertRaises(ValueError):
            parse_hhmm("noon")

    def test_coordinates_range(self):
        Coordinates(-90.0, 180.0)
        with self.assertRaises(ValueError):
            Coordinates(90.5, 0.0)
        with self.assertRaises(ValueError):
            Coordinates(0.0, -180.5)

    def test_daily_timings_require_every_prayer(self):
        with self.assertRaises(ValueError):
            DailyTimings({PrayerName.FAJR: datetime.time(5, 0)})

    def test_daily_timings_need_times(self):
        with self.assertRaises(TypeError):
            DailyTimings()

    def test_daily_timings_keep_canonical_order(self):
        timings = DailyTimings.from_strings({
            "Isha": "19:45",
            "Maghrib": "18:20",
            "Asr": "15:45",
            "Dhuhr": "12:15",
            "Sunrise": "06:30",
            "Fajr": "05:00",
        })
        self.assertEqual([name for name, _ in timings.items()], list(PrayerName))

    def test_snapshot_from_bad_dict(self):
        with self.assertRaises(ParseError):
            CachedSnapshot.from_dict({"timings": "nope", "location": {}, "date": "1-1-2025"})


if __name__ == "__main__":
    unittest.main()
