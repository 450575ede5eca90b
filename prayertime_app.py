#!/usr/bin/env python3
"""
Prayer Time Panel
Terminal host for the prayer time engine:
  - Next prayer and live countdown on a single status line
  - Daily prayer times with the next prayer marked
  - Desktop reminders before each prayer and an alert at prayer time
  - Automatic refresh when the day changes or location settings change
"""

import argparse
import logging
import queue
import sys
import time

from prayertime.labels import CALCULATION_METHODS, LANGUAGES
from prayertime.models import Coordinates
from prayertime.notifier import DesktopNotifier
from prayertime.scheduler import RefreshScheduler
from prayertime.settings import SettingsStore

REFRESH_SECONDS = 1.0  # tick period


# ──────────────────────────────────────────────────────────────────────────────
# Render target
# ──────────────────────────────────────────────────────────────────────────────
class ConsolePanel:
    """Render target writing to a terminal stream."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.label = ""

    def render_label(self, text: str) -> None:
        if text == self.label:
            return
        width = max(len(self.label), len(text))
        self.label = text
        self.stream.write(f"\r{text.ljust(width)}")
        self.stream.flush()

    def render_menu(self, header: str, rows: list, location_line: str) -> None:
        lines = ["", header]
        for row in rows:
            prefix = "➤ " if row.is_next else "   "
            lines.append(f"{prefix}{row.label}: {row.time}")
        if location_line:
            lines.append(location_line)
        self.stream.write("\n".join(lines) + "\n")
        # status line is redrawn on the next tick
        self.label = ""
        self.stream.flush()


# ──────────────────────────────────────────────────────────────────────────────
# Main loop
# ──────────────────────────────────────────────────────────────────────────────
def drain(pending: queue.Queue) -> None:
    """Run the fetch continuations queued by worker threads."""
    while True:
        try:
            callback = pending.get_nowait()
        except queue.Empty:
            return
        callback()


def run(scheduler: RefreshScheduler, pending: queue.Queue, once: bool = False) -> None:
    scheduler.start()
    try:
        while True:
            drain(pending)
            scheduler.tick()
            if once and not scheduler.fetch_in_flight:
                break
            time.sleep(REFRESH_SECONDS - time.time() % REFRESH_SECONDS)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Islamic prayer times with countdown and reminders")
    parser.add_argument("--config", help="Path to the settings file (default: ~/.prayertime/settings.json)")
    parser.add_argument("--lat", type=float, help="Manual latitude; disables automatic location")
    parser.add_argument("--lon", type=float, help="Manual longitude; disables automatic location")
    parser.add_argument("--method", type=int, help="Aladhan calculation method id")
    parser.add_argument("--language", choices=sorted(LANGUAGES), help="Display language")
    parser.add_argument("--once", action="store_true", help="Show the times once and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser.parse_args(argv)


def apply_overrides(settings: SettingsStore, args: argparse.Namespace) -> None:
    """Persist command line overrides into the settings store."""
    if (args.lat is None) != (args.lon is None):
        raise SystemExit("--lat and --lon must be given together")
    # validate everything before the first write
    coordinates = None
    if args.lat is not None:
        coordinates = Coordinates(args.lat, args.lon)
    if args.method is not None and args.method not in CALCULATION_METHODS:
        raise ValueError(f"unknown calculation method: {args.method}")

    if coordinates is not None:
        settings.update({
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "auto-location": False,
        })
    if args.method is not None:
        settings.set("calculation-method", args.method)
    if args.language is not None:
        settings.set("language", args.language)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    settings = SettingsStore(args.config)
    try:
        apply_overrides(settings, args)
    except ValueError as exc:
        raise SystemExit(f"Invalid setting: {exc}")

    pending = queue.Queue()
    panel = ConsolePanel()
    scheduler = RefreshScheduler(
        settings,
        panel,
        DesktopNotifier(),
        dispatch=pending.put,
    )
    run(scheduler, pending, once=args.once)
    panel.stream.write("\n")


if __name__ == "__main__":
    main()
