"""Fetch daily prayer timings from the Aladhan API."""

import datetime
import logging

import requests

from prayertime.errors import NetworkError, UpstreamError
from prayertime.models import Coordinates, DailyTimings, date_key

logger = logging.getLogger(__name__)

ALADHAN_BASE = "https://api.aladhan.com/v1"

DEFAULT_TIMEOUT = 30


class TimingsClient:
    """Stateless client for the /timings endpoint. Retrying is left to the caller."""

    def __init__(self, base_url: str = ALADHAN_BASE, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_timings(
        self,
        coordinates: Coordinates,
        method: int,
        date: datetime.date | None = None,
    ) -> DailyTimings:
        """
        Fetch the six daily timings for given coordinates, method and date.

        Raises NetworkError if the API cannot be reached, UpstreamError if it
        answers with a failure or without usable data.timings.
        """
        if date is None:
            date = datetime.date.today()
        url = f"{self.base_url}/timings/{date_key(date)}"
        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "method": method,
        }
        logger.debug("GET %s %s", url, params)
        try:
            resp = requests.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise UpstreamError(f"Aladhan HTTP error: {exc}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Aladhan unreachable: {exc}") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise UpstreamError("Aladhan reply is not JSON") from exc
        if not isinstance(body, dict) or body.get("code") != 200:
            status = body.get("status") if isinstance(body, dict) else None
            raise UpstreamError(f"Aladhan API error: {status}")

        data = body.get("data")
        raw_timings = data.get("timings") if isinstance(data, dict) else None
        if not isinstance(raw_timings, dict):
            raise UpstreamError("Aladhan reply has no data.timings")

        # Values may carry a zone suffix such as "04:30 (PKT)"
        try:
            return DailyTimings.from_strings(raw_timings)
        except KeyError as exc:
            raise UpstreamError(f"Aladhan reply lacks timing for {exc.args[0]}") from exc
        except (AttributeError, ValueError) as exc:
            raise UpstreamError(f"Aladhan reply has malformed timings: {exc}") from exc
