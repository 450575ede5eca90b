"""Drive fetching, the per-second countdown and notifications."""

import datetime
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

import pytz

from prayertime.cache import TimingsCache
from prayertime.errors import FetchError
from prayertime.labels import format_date, label, prayer_label
from prayertime.location import LocationResolver
from prayertime.models import CachedSnapshot, DailyTimings, LocationInfo, PrayerName, date_key
from prayertime.notifier import NotificationGate
from prayertime.prayer_api import TimingsClient
from prayertime.schedule import PrayerScheduleEngine, format_countdown

logger = logging.getLogger(__name__)

RETRY_INTERVAL = 60  # seconds between automatic refetches after a failure


@dataclass(frozen=True)
class PrayerRow:
    prayer: PrayerName
    label: str
    time: str
    is_next: bool


@dataclass(frozen=True)
class SettingChanged:
    key: str
    value: Any


@dataclass(frozen=True)
class FetchResult:
    seq: int
    date_key: str
    location: LocationInfo | None = None
    timings: DailyTimings | None = None
    error: Exception | None = None


def spawn_thread(target: Callable, *args) -> None:
    """Run target(*args) on a daemon thread."""
    t = threading.Thread(target=target, args=args, daemon=True)
    t.start()


def call_now(callback: Callable[[], None]) -> None:
    callback()


class RefreshScheduler:
    """
    Glue between settings, location, timings, cache, engine and the sinks.

    The host calls start(), then tick() once per second from its own timer,
    and stop() on teardown. Fetches run through `spawn` (a daemon thread by
    default) and hand their result back through `dispatch`, which must run
    the callback on the thread that calls tick(), e.g. queue.Queue.put or
    tkinter's `lambda fn: root.after(0, fn)`.

    `render` needs render_label(text) and render_menu(header, rows, location_line);
    `notifier` needs notify(title, body, icon).
    """

    def __init__(
        self,
        settings,
        render,
        notifier,
        *,
        resolver: LocationResolver | None = None,
        client: TimingsClient | None = None,
        cache: TimingsCache | None = None,
        engine: PrayerScheduleEngine | None = None,
        gate: NotificationGate | None = None,
        clock: Callable[[], datetime.datetime] | None = None,
        spawn: Callable = spawn_thread,
        dispatch: Callable[[Callable[[], None]], None] = call_now,
        retry_interval: float = RETRY_INTERVAL,
    ):
        self.settings = settings
        self.render = render
        self.notifier = notifier
        self.resolver = resolver or LocationResolver(settings)
        self.client = client or TimingsClient()
        self.cache = cache or TimingsCache(settings)
        self.engine = engine or PrayerScheduleEngine()
        self.gate = gate or NotificationGate()
        self._clock = clock or self._local_now
        self._spawn = spawn
        self._dispatch = dispatch
        self.retry_interval = retry_interval

        self.location: LocationInfo | None = None
        self.stale = False
        self._tz = None
        self._running = False
        self._handler_id = None
        self._fetch_seq = 0
        self._applied_seq = 0
        self._failed_at: float | None = None
        self._menu_next = None

        self._reactions = {
            "auto-location": self._on_location_setting,
            "latitude": self._on_location_setting,
            "longitude": self._on_location_setting,
            "timezone": self._on_location_setting,
            "calculation-method": self._on_location_setting,
            "language": self._on_language_setting,
        }

    @property
    def running(self) -> bool:
        return self._running

    @property
    def fetch_in_flight(self) -> bool:
        return self._applied_seq < self._fetch_seq

    # ──────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────────────

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._handler_id = self.settings.connect(self._on_settings_changed)
        self.render.render_label(label("loading", self.settings.language))
        self.request_fetch("startup")

    def stop(self) -> None:
        """Stop reacting. No render, notify or fetch happens after this returns."""
        if not self._running:
            return
        self._running = False
        if self._handler_id is not None:
            self.settings.disconnect(self._handler_id)
            self._handler_id = None

    def refresh(self) -> None:
        self.request_fetch("manual refresh")

    # ──────────────────────────────────────────────────────────────────────
    # Fetch cycle
    # ──────────────────────────────────────────────────────────────────────

    def request_fetch(self, reason: str) -> int | None:
        """Start a fetch cycle and return its sequence number."""
        if not self._running:
            return None
        self._fetch_seq += 1
        seq = self._fetch_seq
        day = self._clock().date()
        method = self.settings.get_int("calculation-method")
        logger.info("Fetching prayer times for %s (%s, #%d)", date_key(day), reason, seq)
        self._spawn(self._fetch_worker, seq, day, method)
        return seq

    def _fetch_worker(self, seq: int, day: datetime.date, method: int) -> None:
        location = None
        try:
            location = self.resolver.resolve()
            timings = self.client.fetch_timings(location.coordinates, method, day)
            result = FetchResult(seq, date_key(day), location, timings)
        except FetchError as exc:
            result = FetchResult(seq, date_key(day), location, error=exc)
        except Exception as exc:
            logger.exception("Unexpected error while fetching prayer times")
            result = FetchResult(seq, date_key(day), location, error=exc)
        self._dispatch(lambda: self.on_fetch_complete(result))

    def on_fetch_complete(self, result: FetchResult) -> None:
        if not self._running:
            return
        if result.seq <= self._applied_seq:
            logger.debug("Dropping stale fetch #%d (already applied #%d)", result.seq, self._applied_seq)
            return
        self._applied_seq = result.seq
        if result.error is None:
            self._apply_success(result)
        else:
            self._apply_failure(result)

    def _apply_success(self, result: FetchResult) -> None:
        logger.info("Prayer times for %s loaded (%s)", result.date_key, result.location.city)
        self._failed_at = None
        self.gate.begin_day(result.date_key)
        try:
            self.cache.save(CachedSnapshot(result.timings, result.location, result.date_key))
        except OSError as exc:
            logger.warning("Could not store prayer times: %s", exc)
            self._failed_at = time.monotonic()
        self._use(result.location, result.timings, stale=False)

    def _apply_failure(self, result: FetchResult) -> None:
        logger.warning("Fetching prayer times failed: %s", result.error)
        now = self._clock()
        self._failed_at = time.monotonic()
        snapshot = self.cache.load()
        if snapshot is not None:
            logger.info("Using cached prayer times from %s", snapshot.date_key)
            self._use(snapshot.location, snapshot.timings, stale=True)
        elif self.engine.timings is not None:
            self.stale = True
            self._render_all(now)
        else:
            self.render.render_label(label("noData", self.settings.language))
            self.render.render_menu(self._header(now), [], "")

    def _use(self, location: LocationInfo, timings: DailyTimings, stale: bool) -> None:
        self.location = location
        self.stale = stale
        self._set_timezone(location.timezone)
        now = self._clock()
        self.engine.set_timings(timings, now)
        self._render_all(now)

    # ──────────────────────────────────────────────────────────────────────
    # Per-second tick
    # ──────────────────────────────────────────────────────────────────────

    def tick(self, now: datetime.datetime | None = None) -> None:
        if not self._running:
            return
        if now is None:
            now = self._clock()

        countdown = self.engine.countdown(now)
        if countdown is not None:
            self.gate.claim_day(date_key(now.date()))
            if countdown.crossed is not None:
                self._check_notifications(countdown.crossed.name, 0)
            self._render_label(countdown)
            if countdown.prayer != self._menu_next:
                self._render_menu(now)
            self._check_notifications(countdown.prayer.name, countdown.minutes_remaining)

        if date_key(now.date()) != self.cache.last_fetch_date() and self._may_refetch():
            self.request_fetch("new day")

    def _may_refetch(self) -> bool:
        if self.fetch_in_flight:
            return False
        if self._failed_at is not None and time.monotonic() - self._failed_at < self.retry_interval:
            return False
        return True

    def _check_notifications(self, prayer: PrayerName, minutes_remaining: float) -> None:
        due = self.gate.check(
            prayer,
            minutes_remaining,
            notifications_enabled=self.settings.get_bool("notifications-enabled"),
            reminder_enabled=self.settings.get_bool("reminder-enabled"),
            reminder_minutes=self.settings.get_int("reminder-minutes"),
            language=self.settings.language,
        )
        for item in due:
            try:
                self.notifier.notify(item.title, item.body, item.icon)
            except Exception:
                logger.exception("Notification sink failed for %s", prayer.value)

    # ──────────────────────────────────────────────────────────────────────
    # Settings
    # ──────────────────────────────────────────────────────────────────────

    def _on_settings_changed(self, store, key: str) -> None:
        reaction = self._reactions.get(key)
        if reaction is None:
            return
        event = SettingChanged(key, store.get(key))
        self._dispatch(lambda: self._react(reaction, event))

    def _react(self, reaction: Callable[[SettingChanged], None], event: SettingChanged) -> None:
        if self._running:
            reaction(event)

    def _on_location_setting(self, event: SettingChanged) -> None:
        logger.info("Setting %s changed to %r, refetching", event.key, event.value)
        self.request_fetch(f"{event.key} changed")

    def _on_language_setting(self, event: SettingChanged) -> None:
        if self.engine.timings is None:
            return
        self._render_all(self._clock())

    # ──────────────────────────────────────────────────────────────────────
    # Rendering
    # ──────────────────────────────────────────────────────────────────────

    def _render_all(self, now: datetime.datetime) -> None:
        self._render_label(self.engine.countdown(now))
        self._render_menu(now)

    def _render_label(self, countdown) -> None:
        name = prayer_label(countdown.prayer.name, self.settings.language)
        self.render.render_label(f"{name} {format_countdown(countdown.total_seconds)}")

    def _render_menu(self, now: datetime.datetime) -> None:
        language = self.settings.language
        current = self.engine.current
        self._menu_next = current
        rows = [
            PrayerRow(
                prayer=name,
                label=prayer_label(name, language),
                time=time_of_day.strftime("%H:%M"),
                is_next=current is not None and current.name == name,
            )
            for name, time_of_day in self.engine.timings.items()
        ]
        self.render.render_menu(self._header(now), rows, self._location_line())

    def _location_line(self) -> str:
        if self.location is None:
            return ""
        line = f"📍 {self.location.city}"
        if self.stale:
            line += f" ({label('cached', self.settings.language)})"
        return line

    def _header(self, now: datetime.datetime) -> str:
        return format_date(now.date(), self.settings.language)

    # ──────────────────────────────────────────────────────────────────────
    # Clock
    # ──────────────────────────────────────────────────────────────────────

    def _set_timezone(self, name: str | None) -> None:
        if not name:
            self._tz = None
            return
        try:
            self._tz = pytz.timezone(name)
        except pytz.UnknownTimeZoneError:
            logger.warning("Unknown timezone %r, using local time", name)
            self._tz = None

    def _local_now(self) -> datetime.datetime:
        return datetime.datetime.now(self._tz) if self._tz else datetime.datetime.now()
