"""Tests for the prayer_api module."""

import copy
import datetime
import unittest
from unittest.mock import MagicMock, patch

import requests

from prayertime.errors import FetchError, NetworkError, UpstreamError
from prayertime.models import Coordinates, PrayerName
from prayertime.prayer_api import TimingsClient

MOCK_RESPONSE = {
    "code": 200,
    "status": "OK",
    "data": {
        "timings": {
            "Fajr": "04:30",
            "Sunrise": "05:55",
            "Dhuhr": "12:00",
            "Asr": "15:30",
            "Maghrib": "18:15",
            "Isha": "19:30",
            "Midnight": "00:00",
            "Imsak": "04:20",
        },
        "date": {
            "gregorian": {"date": "01-03-2025"},
        },
    },
}

COORDS = Coordinates(-6.2, 106.8)


def _mock_response(body):
    mock_resp = MagicMock()
    mock_resp.json.return_value = body
    mock_resp.raise_for_status = MagicMock()
    return mock_resp


class TestFetchTimings(unittest.TestCase):
    @patch("prayertime.prayer_api.requests.get")
    def test_returns_six_timings(self, mock_get):
        mock_get.return_value = _mock_response(MOCK_RESPONSE)

        timings = TimingsClient().fetch_timings(COORDS, 13, datetime.date(2025, 3, 1))

        self.assertEqual(timings[PrayerName.FAJR], datetime.time(4, 30))
        self.assertEqual(timings[PrayerName.MAGHRIB], datetime.time(18, 15))
        self.assertEqual(len(list(timings.items())), 6)

    @patch("prayertime.prayer_api.requests.get")
    def test_request_uses_unpadded_date_and_params(self, mock_get):
        mock_get.return_value = _mock_response(MOCK_RESPONSE)

        TimingsClient().fetch_timings(COORDS, 3, datetime.date(2025, 3, 5))

        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "https://api.aladhan.com/v1/timings/5-3-2025")
        self.assertEqual(kwargs["params"], {"latitude": -6.2, "longitude": 106.8, "method": 3})
        self.assertIn("timeout", kwargs)

    @patch("prayertime.prayer_api.requests.get")
    def test_strips_zone_suffix_from_time(self, mock_get):
        response = copy.deepcopy(MOCK_RESPONSE)
        response["data"]["timings"]["Fajr"] = "04:30 (PKT)"
        mock_get.return_value = _mock_response(response)

        timings = TimingsClient().fetch_timings(COORDS, 13)
        self.assertEqual(timings[PrayerName.FAJR], datetime.time(4, 30))

    @patch("prayertime.prayer_api.requests.get")
    def test_raises_on_api_error(self, mock_get):
        mock_get.return_value = _mock_response({"code": 400, "status": "Bad Request"})

        with self.assertRaises(UpstreamError):
            TimingsClient().fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_raises_when_timings_missing(self, mock_get):
        mock_get.return_value = _mock_response({"code": 200, "data": {}})

        with self.assertRaises(UpstreamError):
            TimingsClient().fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_raises_when_one_prayer_missing(self, mock_get):
        response = copy.deepcopy(MOCK_RESPONSE)
        del response["data"]["timings"]["Asr"]
        mock_get.return_value = _mock_response(response)

        with self.assertRaises(UpstreamError):
            TimingsClient().fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_raises_on_malformed_time(self, mock_get):
        response = copy.deepcopy(MOCK_RESPONSE)
        response["data"]["timings"]["Isha"] = "late"
        mock_get.return_value = _mock_response(response)

        with self.assertRaises(UpstreamError):
            TimingsClient().fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_raises_on_non_json_body(self, mock_get):
        mock_resp = _mock_response(None)
        mock_resp.json.side_effect = ValueError("no JSON")
        mock_get.return_value = mock_resp

        with self.assertRaises(UpstreamError):
            TimingsClient().fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_http_status_error_is_upstream_error(self, mock_get):
        mock_resp = _mock_response(MOCK_RESPONSE)
        mock_resp.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_get.return_value = mock_resp

        with self.assertRaises(UpstreamError):
            TimingsClient().fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_connection_failure_is_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("unreachable")

        with self.assertRaises(NetworkError) as ctx:
            TimingsClient().fetch_timings(COORDS, 13)
        self.assertIsInstance(ctx.exception, FetchError)

    @patch("prayertime.prayer_api.requests.get")
    def test_timeout_is_network_error(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")

        with self.assertRaises(NetworkError):
            TimingsClient(timeout=1).fetch_timings(COORDS, 13)

    @patch("prayertime.prayer_api.requests.get")
    def test_custom_base_url(self, mock_get):
        mock_get.return_value = _mock_response(MOCK_RESPONSE)

        TimingsClient(base_url="http://localhost:8080/v1/").fetch_timings(
            COORDS, 13, datetime.date(2025, 12, 31)
        )
        self.assertEqual(mock_get.call_args[0][0], "http://localhost:8080/v1/timings/31-12-2025")


if __name__ == "__main__":
    unittest.main()
