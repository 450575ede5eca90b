"""Location resolution: manual override, IP geolocation, last detected location, default."""

import logging

import requests

from prayertime.errors import NetworkError, UpstreamError
from prayertime.labels import label
from prayertime.models import Coordinates, LocationInfo, LocationSource

logger = logging.getLogger(__name__)

IPAPI_URL = "http://ip-api.com/json/"
IPAPI_FIELDS = "status,message,city,lat,lon,timezone"

DEFAULT_TIMEOUT = 10


def lookup_ip_location(timeout: float = DEFAULT_TIMEOUT) -> dict:
    """
    Query ip-api.com for the current location.

    Returns a dict with: lat, lon, city, timezone.
    Raises NetworkError when the service cannot be reached and
    UpstreamError when it answers with anything but a usable success payload.
    """
    try:
        resp = requests.get(IPAPI_URL, params={"fields": IPAPI_FIELDS}, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as exc:
        raise UpstreamError(f"geolocation HTTP error: {exc}") from exc
    except requests.RequestException as exc:
        raise NetworkError(f"geolocation unreachable: {exc}") from exc

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamError("geolocation reply is not JSON") from exc
    if not isinstance(data, dict) or data.get("status") != "success":
        message = data.get("message") if isinstance(data, dict) else None
        raise UpstreamError(f"geolocation failed: {message or 'unknown status'}")

    try:
        Coordinates(float(data["lat"]), float(data["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamError(f"geolocation reply has no usable coordinates: {exc}") from exc

    return {
        "lat": float(data["lat"]),
        "lon": float(data["lon"]),
        "city": data.get("city") or "",
        "timezone": data.get("timezone") or "",
    }


class LocationResolver:
    """Decide which coordinates are used for the timings lookup."""

    def __init__(self, settings, timeout: float = DEFAULT_TIMEOUT):
        self.settings = settings
        self.timeout = timeout

    def resolve(self) -> LocationInfo:
        """Return the location to use. Never raises; failures fall through to the next tier."""
        language = self.settings.language
        if not self.settings.get_bool("auto-location"):
            return self._manual(label("manualLocation", language), LocationSource.MANUAL)

        try:
            found = lookup_ip_location(self.timeout)
        except (NetworkError, UpstreamError) as exc:
            logger.warning("Location detection failed, using fallback: %s", exc)
        else:
            try:
                self.settings.update({
                    "detected-latitude": found["lat"],
                    "detected-longitude": found["lon"],
                    "detected-city": found["city"],
                    "detected-timezone": found["timezone"],
                })
            except OSError as exc:
                logger.warning("Could not remember detected location: %s", exc)
            return LocationInfo(
                coordinates=Coordinates(found["lat"], found["lon"]),
                city=found["city"] or label("unknown", language),
                source=LocationSource.DETECTED,
                timezone=found["timezone"] or None,
            )

        cached = self._last_detected(language)
        if cached is not None:
            return cached
        return self._manual(label("defaultIstanbul", language), LocationSource.DEFAULT)

    def _last_detected(self, language: str) -> LocationInfo | None:
        lat = self.settings.get_float("detected-latitude")
        lon = self.settings.get_float("detected-longitude")
        # 0/0 is the "never detected" marker
        if lat == 0 and lon == 0:
            return None
        try:
            coordinates = Coordinates(lat, lon)
        except ValueError as exc:
            logger.warning("Ignoring stored detected location: %s", exc)
            return None
        return LocationInfo(
            coordinates=coordinates,
            city=self.settings.get_string("detected-city") or label("cachedLocation", language),
            source=LocationSource.CACHED_DETECTED,
            timezone=self.settings.get_string("detected-timezone") or None,
        )

    def _manual(self, city: str, source: LocationSource) -> LocationInfo:
        return LocationInfo(
            coordinates=Coordinates(
                self.settings.get_float("latitude"),
                self.settings.get_float("longitude"),
            ),
            city=city,
            source=source,
            timezone=self.settings.get_string("timezone") or None,
        )
