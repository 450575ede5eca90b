"""Persist the last successfully fetched timings for offline fallback."""

import json
import logging

from prayertime.errors import CacheMissError, ParseError
from prayertime.models import CachedSnapshot

logger = logging.getLogger(__name__)

EMPTY_CACHE = "{}"


class TimingsCache:
    """
    Snapshot storage on top of the settings store.

    The snapshot lives in 'cached-times' as JSON and its date key is mirrored
    in 'last-fetch-date'. Saving overwrites both; nothing is merged.
    """

    def __init__(self, settings):
        self.settings = settings

    def save(self, snapshot: CachedSnapshot) -> None:
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False)
        self.settings.set("cached-times", payload)
        self.settings.set("last-fetch-date", snapshot.date_key)

    def require(self) -> CachedSnapshot:
        """Return the stored snapshot. Raises CacheMissError or ParseError."""
        raw = self.settings.get_string("cached-times")
        if not raw or raw == EMPTY_CACHE:
            raise CacheMissError("no cached timings")
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ParseError(f"cached timings are not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseError("cached timings are not a JSON object")
        return CachedSnapshot.from_dict(data)

    def load(self) -> CachedSnapshot | None:
        try:
            return self.require()
        except CacheMissError:
            return None
        except ParseError as exc:
            logger.warning("Discarding unreadable cached timings: %s", exc)
            return None

    def last_fetch_date(self) -> str | None:
        return self.settings.get_string("last-fetch-date") or None
