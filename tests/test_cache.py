"""Tests for the cache module."""

import json
import os
import shutil
import tempfile
import unittest

from prayertime.cache import TimingsCache
from prayertime.errors import CacheMissError, ParseError
from prayertime.models import (
    CachedSnapshot,
    Coordinates,
    DailyTimings,
    LocationInfo,
    LocationSource,
)
from prayertime.settings import SettingsStore

TIMINGS = DailyTimings.from_strings({
    "Fajr": "06:22",
    "Sunrise": "07:48",
    "Dhuhr": "13:23",
    "Asr": "16:19",
    "Maghrib": "18:48",
    "Isha": "20:08",
})

LOCATION = LocationInfo(
    coordinates=Coordinates(41.0082, 28.9784),
    city="Istanbul",
    source=LocationSource.DETECTED,
    timezone="Europe/Istanbul",
)


class TestTimingsCache(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.mkdtemp()
        self.path = os.path.join(self._tmpdir, "settings.json")
        self.settings = SettingsStore(self.path)
        self.cache = TimingsCache(self.settings)

    def tearDown(self):
        shutil.rmtree(self._tmpdir, ignore_errors=True)

    def test_save_and_load(self):
        snapshot = CachedSnapshot(TIMINGS, LOCATION, "19-10-2026")
        self.cache.save(snapshot)

        self.assertEqual(self.cache.load(), snapshot)
        self.assertEqual(self.cache.last_fetch_date(), "19-10-2026")

    def test_survives_restart(self):
        self.cache.save(CachedSnapshot(TIMINGS, LOCATION, "19-10-2026"))

        reopened = TimingsCache(SettingsStore(self.path))
        loaded = reopened.load()
        self.assertEqual(loaded.location.city, "Istanbul")
        self.assertEqual(loaded.timings.to_dict()["Isha"], "20:08")

    def test_last_write_wins(self):
        self.cache.save(CachedSnapshot(TIMINGS, LOCATION, "19-10-2026"))
        manual = LocationInfo(Coordinates(21.4225, 39.8262), "Manual Location", LocationSource.MANUAL)
        self.cache.save(CachedSnapshot(TIMINGS, manual, "20-10-2026"))

        loaded = self.cache.load()
        self.assertEqual(loaded.location.source, LocationSource.MANUAL)
        self.assertIsNone(loaded.location.timezone)
        self.assertEqual(loaded.date_key, "20-10-2026")

    def test_load_returns_none_when_empty(self):
        self.assertIsNone(self.cache.load())
        self.assertIsNone(self.cache.last_fetch_date())
        with self.assertRaises(CacheMissError):
            self.cache.require()

    def test_load_returns_none_for_invalid_json(self):
        self.settings.set("cached-times", "not valid json")
        self.assertIsNone(self.cache.load())
        with self.assertRaises(ParseError):
            self.cache.require()

    def test_load_returns_none_for_missing_keys(self):
        self.settings.set("cached-times", json.dumps({"timings": {"Fajr": "05:00"}}))
        self.assertIsNone(self.cache.load())
        with self.assertRaises(ParseError):
            self.cache.require()

    def test_reads_snapshot_without_source(self):
        self.settings.set("cached-times", json.dumps({
            "timings": TIMINGS.to_dict(),
            "location": {"latitude": 41.0, "longitude": 29.0, "city": "Istanbul"},
            "date": "5-3-2025",
        }))
        loaded = self.cache.load()
        self.assertEqual(loaded.location.source, LocationSource.DETECTED)
        self.assertEqual(loaded.date_key, "5-3-2025")


if __name__ == "__main__":
    unittest.main()
