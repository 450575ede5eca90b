"""Next-prayer lookup and the per-second countdown."""

import datetime
import logging

from prayertime.models import Countdown, DailyTimings, NextPrayer, PrayerName

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

# A boundary overshot by more than this (e.g. after suspend) is not reported as crossed
CROSSING_GRACE_SECONDS = 60


def minute_of_day(moment) -> int:
    return moment.hour * 60 + moment.minute


def next_prayer(timings: DailyTimings, now: datetime.datetime) -> NextPrayer:
    """
    Return the first prayer whose time is strictly later than now's minute.

    When every prayer has passed, return tomorrow's Fajr with rollover=True;
    today's Fajr time stands in for tomorrow's.
    """
    now_minutes = minute_of_day(now)
    for name, time_of_day in timings.items():
        total = minute_of_day(time_of_day)
        if total > now_minutes:
            return NextPrayer(name, time_of_day, total)
    fajr = timings[PrayerName.FAJR]
    return NextPrayer(PrayerName.FAJR, fajr, minute_of_day(fajr), rollover=True)


def minutes_until(prayer: NextPrayer, now: datetime.datetime) -> int:
    """Whole-minute difference between now's minute and the prayer's minute."""
    now_minutes = minute_of_day(now)
    if prayer.rollover:
        return (MINUTES_PER_DAY - now_minutes) + prayer.total_minutes
    return prayer.total_minutes - now_minutes


def format_countdown(total_seconds: int) -> str:
    """Format seconds as H:MM:SS, or M:SS when under an hour."""
    total_seconds = max(0, int(total_seconds))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class PrayerScheduleEngine:
    """
    Holds the day's timings and the prayer currently counted down to.

    The held prayer is only replaced when new timings arrive, when the
    calendar date moves under it, or when the countdown to it turns negative.
    Keeping it across ticks is what lets the prayer's own minute report
    minutes_remaining == 0.
    """

    def __init__(self):
        self.timings: DailyTimings | None = None
        self.current: NextPrayer | None = None
        self._anchor_date: datetime.date | None = None

    def set_timings(self, timings: DailyTimings, now: datetime.datetime) -> NextPrayer:
        self.timings = timings
        return self._recompute(now)

    def _recompute(self, now: datetime.datetime) -> NextPrayer:
        self.current = next_prayer(self.timings, now)
        self._anchor_date = now.date()
        return self.current

    def countdown(self, now: datetime.datetime) -> Countdown | None:
        """
        Return the countdown to the held prayer, or None without timings.

        A negative result means the prayer's boundary passed since it was
        chosen: the next prayer is recomputed for now and the countdown redone
        once, then clamped at zero.
        """
        if self.timings is None:
            return None
        if self._anchor_date != now.date():
            self._recompute(now)

        prayer = self.current
        minutes = minutes_until(prayer, now)
        total = minutes * 60 - now.second
        crossed = None
        if total < 0:
            if -total <= CROSSING_GRACE_SECONDS:
                crossed = prayer
            passed = prayer
            prayer = self._recompute(now)
            logger.debug("Passed %s, now counting down to %s", passed.name.value, prayer.name.value)
            minutes = minutes_until(prayer, now)
            total = minutes * 60 - now.second
            if total < 0:
                total = 0
        return Countdown(prayer=prayer, total_seconds=total, minutes_remaining=minutes, crossed=crossed)
