"""Data types shared by the resolver, client, cache and schedule engine."""

import datetime
import enum
from dataclasses import dataclass

from prayertime.errors import ParseError


class PrayerName(str, enum.Enum):
    FAJR = "Fajr"
    SUNRISE = "Sunrise"
    DHUHR = "Dhuhr"
    ASR = "Asr"
    MAGHRIB = "Maghrib"
    ISHA = "Isha"


# Canonical chronological order of the day
PRAYER_ORDER = tuple(PrayerName)


class LocationSource(str, enum.Enum):
    MANUAL = "manual"
    DETECTED = "detected"
    CACHED_DETECTED = "cachedDetected"
    DEFAULT = "default"


def date_key(day: datetime.date) -> str:
    """Return the 'D-M-YYYY' key used in the timings URL and the fetch record."""
    return f"{day.day}-{day.month}-{day.year}"


def parse_hhmm(raw: str) -> datetime.time:
    """
    Parse an 'HH:MM' string into a time of day.

    Trailing annotations such as '04:30 (PKT)' are ignored.
    Raises ValueError for anything else.
    """
    hour, minute = map(int, raw.strip()[:5].split(":"))
    return datetime.time(hour, minute)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class LocationInfo:
    coordinates: Coordinates
    city: str
    source: LocationSource
    timezone: str | None = None

    def to_dict(self) -> dict:
        return {
            "latitude": self.coordinates.latitude,
            "longitude": self.coordinates.longitude,
            "city": self.city,
            "source": self.source.value,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LocationInfo":
        return cls(
            coordinates=Coordinates(float(data["latitude"]), float(data["longitude"])),
            city=str(data.get("city", "")),
            source=LocationSource(data.get("source", LocationSource.DETECTED.value)),
            timezone=data.get("timezone") or None,
        )


@dataclass(frozen=True)
class DailyTimings:
    """One time of day per prayer name, in canonical order."""

    times: dict

    def __post_init__(self):
        missing = [name.value for name in PRAYER_ORDER if name not in self.times]
        if missing:
            raise ValueError(f"missing timings for: {', '.join(missing)}")

    def __getitem__(self, name: PrayerName) -> datetime.time:
        return self.times[name]

    def items(self):
        for name in PRAYER_ORDER:
            yield name, self.times[name]

    def to_dict(self) -> dict:
        return {name.value: t.strftime("%H:%M") for name, t in self.items()}

    @classmethod
    def from_strings(cls, raw: dict) -> "DailyTimings":
        """Build timings from a {name: 'HH:MM'} mapping. Raises ValueError or KeyError."""
        return cls({name: parse_hhmm(raw[name.value]) for name in PRAYER_ORDER})


@dataclass(frozen=True)
class CachedSnapshot:
    timings: DailyTimings
    location: LocationInfo
    date_key: str

    def to_dict(self) -> dict:
        return {
            "timings": self.timings.to_dict(),
            "location": self.location.to_dict(),
            "date": self.date_key,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CachedSnapshot":
        try:
            return cls(
                timings=DailyTimings.from_strings(data["timings"]),
                location=LocationInfo.from_dict(data["location"]),
                date_key=str(data["date"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ParseError(f"invalid cached snapshot: {exc}") from exc


@dataclass(frozen=True)
class NextPrayer:
    name: PrayerName
    time_of_day: datetime.time
    total_minutes: int
    rollover: bool = False


@dataclass(frozen=True)
class Countdown:
    prayer: NextPrayer
    total_seconds: int
    minutes_remaining: int
    crossed: NextPrayer | None = None

    @property
    def hours(self) -> int:
        return self.total_seconds // 3600

    @property
    def minutes(self) -> int:
        return (self.total_seconds % 3600) // 60

    @property
    def seconds(self) -> int:
        return self.total_seconds % 60
