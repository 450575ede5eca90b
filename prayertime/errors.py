"""Error types raised by the fetch, cache and settings layers."""


class PrayerTimeError(Exception):
    """Base class for every error raised by this package."""


class FetchError(PrayerTimeError):
    """A timings or location request could not produce usable data."""


class NetworkError(FetchError):
    """The remote service was unreachable or timed out."""


class UpstreamError(FetchError):
    """The remote service answered with a failure status or an incomplete payload."""


class CacheMissError(PrayerTimeError):
    """No cached snapshot has been stored yet."""


class ParseError(PrayerTimeError):
    """The stored snapshot exists but cannot be read back."""
