"""
Export extracted schedule entries to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Sequence, Union

import icalendar
import pytz

from . import config
from .models import ExtractionResult, ScheduleEntry

FIELDS = ["date", "time", "class_name", "instructor", "status", "open_spots", "price", "price_text"]

Exportable = Union[ExtractionResult, Sequence[ScheduleEntry]]


def _entries(data: Exportable) -> List[ScheduleEntry]:
    if isinstance(data, ExtractionResult):
        return list(data.entries)
    return list(data)


def _parse_start(date_str: str, time_str: str) -> datetime:
    """Combine '2025-09-03' and '9:00 AM'."""
    if not date_str or not time_str:
        raise ValueError("Missing date or time")
    return datetime.strptime(f"{date_str.strip()} {time_str.strip().upper()}", "%Y-%m-%d %I:%M %p")


def _describe(entry: ScheduleEntry) -> str:
    lines = []
    if entry.instructor:
        lines.append(f"Instructor: {entry.instructor}")
    status = entry.status
    if entry.open_spots is not None and entry.status == "open":
        status += f" ({entry.open_spots} spots)"
    lines.append(f"Status: {status}")
    if entry.price_text:
        lines.append(f"Drop-in: {entry.price_text}")
    return "\n".join(lines)


def export_ics(data: Exportable, out_path: str | Path, class_minutes: int | None = None) -> None:
    """Export entries to iCalendar (.ics), one event per class."""
    tz = pytz.timezone(config.VENUE_TZ)
    duration = timedelta(minutes=class_minutes or config.CLASS_MINUTES)

    cal = icalendar.Calendar()
    cal.add("prodid", "-//Walla Schedule Export//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", "Class Schedule")
    cal.add("x-wr-timezone", config.VENUE_TZ)

    for e in _entries(data):
        try:
            start = _parse_start(e.date or "", e.time)
        except ValueError:
            continue

        event = icalendar.Event()

        # Deterministic UID so re-exports update instead of duplicating
        uid_string = f"{e.date}-{e.time}-{e.class_name}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@walla-schedule-export")

        event.add("summary", e.class_name or "Class")
        event.add("description", _describe(e))
        event.add("dtstart", tz.localize(start))
        event.add("dtend", tz.localize(start + duration))
        event.add("dtstamp", datetime.now(timezone.utc))
        cal.add_component(event)

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")


def export_csv(data: Exportable, out_path: str | Path) -> None:
    """Export entries to CSV with the stable field set as header."""
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=FIELDS, extrasaction="ignore")
        w.writeheader()
        w.writerows(e.to_dict() for e in _entries(data))


def to_json(data: Exportable) -> str:
    if isinstance(data, ExtractionResult):
        payload = data.to_dict()
    else:
        payload = [e.to_dict() for e in data]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_json(data: Exportable, out_path: str | Path) -> None:
    """Export the full result (or a bare entry list) to JSON."""
    Path(out_path).write_text(to_json(data), encoding="utf-8")


def export(data: Exportable, out_path: str | Path, fmt: str) -> None:
    """Export to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        export_ics(data, out_path)
    elif fmt == "csv":
        export_csv(data, out_path)
    elif fmt == "json":
        export_json(data, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")
