"""Typed key/value settings persisted to a JSON file, with change notifications."""

import json
import logging
import os
import threading
from typing import Any, Callable

from prayertime.labels import CALCULATION_METHODS, DEFAULT_METHOD, FALLBACK_LANGUAGE, LANGUAGES

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".prayertime")
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.json")

REMINDER_MIN = 1
REMINDER_MAX = 120

# key -> (type, default); Istanbul is the out-of-the-box location
DEFAULTS = {
    "auto-location": (bool, True),
    "latitude": (float, 41.0082),
    "longitude": (float, 28.9784),
    "timezone": (str, ""),
    "calculation-method": (int, DEFAULT_METHOD),
    "language": (str, "tr"),
    "detected-latitude": (float, 0.0),
    "detected-longitude": (float, 0.0),
    "detected-city": (str, ""),
    "detected-timezone": (str, ""),
    "cached-times": (str, "{}"),
    "last-fetch-date": (str, ""),
    "notifications-enabled": (bool, True),
    "reminder-enabled": (bool, True),
    "reminder-minutes": (int, 10),
}

SettingsCallback = Callable[["SettingsStore", str], None]


def _coerce(key: str, value: Any) -> Any:
    """Convert value to the declared type of key, raising ValueError when it does not fit."""
    kind, _ = DEFAULTS[key]
    if kind is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{key} expects a boolean, got {value!r}")
        return value
    try:
        value = kind(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} expects {kind.__name__}, got {value!r}") from exc

    if key == "latitude" and not -90.0 <= value <= 90.0:
        raise ValueError(f"latitude out of range: {value}")
    if key == "longitude" and not -180.0 <= value <= 180.0:
        raise ValueError(f"longitude out of range: {value}")
    if key == "calculation-method" and value not in CALCULATION_METHODS:
        raise ValueError(f"unknown calculation method: {value}")
    if key == "reminder-minutes":
        value = max(REMINDER_MIN, min(REMINDER_MAX, value))
    return value


class SettingsStore:
    """
    Settings backed by a JSON file.

    Every set() writes the whole file and, when the value actually changed,
    calls the connected callbacks with (store, key) in the calling thread.
    """

    def __init__(self, path: str | None = None):
        self.path = path or CONFIG_FILE
        self._lock = threading.RLock()
        self._values = {key: default for key, (_, default) in DEFAULTS.items()}
        self._callbacks: dict = {}
        self._next_handler_id = 1
        self._load()

    def _load(self) -> None:
        if not os.path.isfile(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.path)
            return
        for key, value in data.items():
            if key not in DEFAULTS:
                continue
            try:
                self._values[key] = _coerce(key, value)
            except ValueError as exc:
                logger.warning("Ignoring stored setting %s: %s", key, exc)

    def _save(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Any:
        if key not in DEFAULTS:
            raise KeyError(key)
        with self._lock:
            return self._values[key]

    def set(self, key: str, value: Any) -> None:
        if key not in DEFAULTS:
            raise KeyError(key)
        value = _coerce(key, value)
        with self._lock:
            if self._values[key] == value:
                return
            self._values[key] = value
            self._save()
            callbacks = list(self._callbacks.values())
        for callback in callbacks:
            callback(self, key)

    def update(self, values: dict) -> None:
        for key, value in values.items():
            self.set(key, value)

    def get_bool(self, key: str) -> bool:
        return bool(self.get(key))

    def get_int(self, key: str) -> int:
        return int(self.get(key))

    def get_float(self, key: str) -> float:
        return float(self.get(key))

    def get_string(self, key: str) -> str:
        return str(self.get(key))

    @property
    def language(self) -> str:
        language = self.get_string("language")
        return language if language in LANGUAGES else FALLBACK_LANGUAGE

    def connect(self, callback: SettingsCallback) -> int:
        """Register a change callback and return its handler id."""
        with self._lock:
            handler_id = self._next_handler_id
            self._next_handler_id += 1
            self._callbacks[handler_id] = callback
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        with self._lock:
            self._callbacks.pop(handler_id, None)
