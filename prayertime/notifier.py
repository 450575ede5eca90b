"""Per-day notification gate and desktop notifications for prayer times."""

import logging
import math
import os
from dataclasses import dataclass

from plyer import notification as plyer_notification

from prayertime.labels import label, prayer_label
from prayertime.models import PrayerName

logger = logging.getLogger(__name__)

APP_NAME = "Prayer Times"

ON_TIME_ICON = "appointment-soon-symbolic"
REMINDER_ICON = "alarm-symbolic"


@dataclass(frozen=True)
class Notification:
    title: str
    body: str
    icon: str


class NotificationGate:
    """
    Decide when on-time and reminder notifications fire.

    Each prayer gets at most one on-time and one reminder notification per
    calendar day. The fired sets belong to this instance and are only cleared
    by begin_day() with a date key different from the current one.
    """

    def __init__(self):
        self.day_key: str | None = None
        self.notified_prayers: set = set()
        self.notified_reminders: set = set()

    def begin_day(self, date_key: str) -> bool:
        """Switch to date_key. Returns True when the fired sets were reset."""
        if date_key == self.day_key:
            return False
        logger.info("New prayer day %s, re-arming notifications", date_key)
        self.day_key = date_key
        self.notified_prayers.clear()
        self.notified_reminders.clear()
        return True

    def claim_day(self, date_key: str) -> bool:
        """
        Adopt date_key while nothing has fired under the current key.

        Notifications sent before the first successful fetch of a day (offline
        start on a cached snapshot) then count for that day, and the fetch does
        not re-arm them. Fired entries are never cleared here.
        """
        if date_key == self.day_key or self.notified_prayers or self.notified_reminders:
            return False
        self.day_key = date_key
        return True

    def check(
        self,
        prayer: PrayerName,
        minutes_remaining: float,
        *,
        notifications_enabled: bool = True,
        reminder_enabled: bool = True,
        reminder_minutes: int = 10,
        language: str = "en",
    ) -> list:
        """Return the notifications due for prayer at minutes_remaining, marking them fired."""
        if not notifications_enabled:
            return []

        due = []
        name = prayer_label(prayer, language)
        if minutes_remaining <= 0 and prayer not in self.notified_prayers:
            self.notified_prayers.add(prayer)
            due.append(Notification(
                title=label("prayerTime", language),
                body=f"{name} {label('timeEntered', language)}",
                icon=ON_TIME_ICON,
            ))

        if (
            reminder_enabled
            and 0 < minutes_remaining <= reminder_minutes
            and prayer not in self.notified_reminders
        ):
            self.notified_reminders.add(prayer)
            due.append(Notification(
                title=label("prayerReminder", language),
                body=(
                    f"{name} {label('toTime', language)} "
                    f"{math.ceil(minutes_remaining)} {label('minutesRemaining', language)}"
                ),
                icon=REMINDER_ICON,
            ))
        return due


class DesktopNotifier:
    """
    Notification sink that shows alerts through plyer. Never raises.

    plyer takes an icon file, so `icon_paths` maps icon names (ON_TIME_ICON,
    REMINDER_ICON) to files. An icon that is already a file path is used as is;
    anything else is left to the backend default.
    """

    def __init__(self, app_name: str = APP_NAME, timeout: int = 15, icon_paths: dict | None = None):
        self.app_name = app_name
        self.timeout = timeout
        self.icon_paths = dict(icon_paths or {})

    def _icon_file(self, icon: str) -> str | None:
        path = self.icon_paths.get(icon, icon)
        return path if path and os.path.isfile(path) else None

    def notify(self, title: str, body: str, icon: str = "") -> None:
        kwargs = dict(
            app_name=self.app_name,
            title=title,
            message=body,
            timeout=self.timeout,
        )
        app_icon = self._icon_file(icon)
        if app_icon:
            kwargs["app_icon"] = app_icon
        try:
            plyer_notification.notify(**kwargs)
        except Exception:
            logger.exception("Failed to show notification %r (%s)", title, icon)
