"""
Work out which calendar day the widget is actually showing.

The widget does not always honour the requested day, so the day printed on
the page is read back and compared with what was asked for:

1. the frame URL's date query parameter (set by whoever navigated the frame)
2. heading-like elements reading e.g. "WEDNESDAY, SEPTEMBER 3"
3. the same pattern anywhere in the visible text
"""
from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

import pytz

from . import config
from .content import ContentProvider

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────
#  Calendar names
# ──────────────────────────────────────────────────────────────────

MONTHS = [
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
]
_MONTH_MAP = {name.upper(): i for i, name in enumerate(MONTHS, start=1)}
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_WEEKDAY_ALT = "|".join(w.upper() for w in WEEKDAYS)

# "WEDNESDAY, SEPTEMBER 3" / "Wednesday, September 3"
DAY_HEADER_RE = re.compile(rf"^(?:{_WEEKDAY_ALT}),?\s+([A-Z]+)\s+(\d{{1,2}})$", re.I)
_DAY_HEADER_ANYWHERE_RE = re.compile(rf"\b(?:{_WEEKDAY_ALT}),?\s+([A-Z]+)\s+(\d{{1,2}})\b", re.I)

HEADING_SELECTORS = (
    "h1", "h2", "h3", "h4", "[role=heading]",
    ".date-header", ".day-header", ".schedule-day-header", ".walla-date", ".day-title",
)

_ISO_RE = re.compile(r"(\d{4}-\d{2}-\d{2})")


def pick_iso(value) -> str:
    """Pull a YYYY-MM-DD out of anything (handles '=2025-09-03' too)."""
    if not value:
        return ""
    m = _ISO_RE.search(str(value))
    return m.group(1) if m else ""


def parse_iso(value) -> Optional[date]:
    """Like pick_iso, but only a real calendar date passes."""
    iso = pick_iso(value)
    if not iso:
        return None
    try:
        return date.fromisoformat(iso)
    except ValueError:
        return None


def venue_today() -> date:
    return datetime.now(pytz.timezone(config.VENUE_TZ)).date()


def year_from_iso(iso: str | None) -> int:
    """Year of an ISO date, else the current year at the venue."""
    try:
        year = int((iso or "")[:4])
    except ValueError:
        year = 0
    if 1900 <= year <= 3000:
        return year
    return venue_today().year


def header_variants(day: date) -> List[str]:
    """
    Ways the widget labels a day:
    'WEDNESDAY, SEPTEMBER 3', 'Wednesday, September 3', 'Sep 3'.
    """
    weekday = WEEKDAYS[day.weekday()]
    month = MONTHS[day.month - 1]
    mixed = f"{weekday}, {month} {day.day}"
    return [mixed.upper(), mixed, f"{month[:3]} {day.day}"]


def _date_from_match(m: re.Match, year: int) -> Optional[str]:
    month = _MONTH_MAP.get(m.group(1).upper())
    if not month:
        return None
    try:
        return date(year, month, int(m.group(2))).isoformat()
    except ValueError:
        return None


def header_date(text: str, year: int) -> Optional[str]:
    """ISO date of a day header ('Wednesday September 3'), else None."""
    m = DAY_HEADER_RE.match(" ".join((text or "").split()))
    return _date_from_match(m, year) if m else None


# ──────────────────────────────────────────────────────────────────
#  Sources, most trusted first
# ──────────────────────────────────────────────────────────────────

def date_from_url(url: str, param: str | None = None) -> Optional[str]:
    """Date query parameter of the frame URL, if well-formed."""
    if not url:
        return None
    param = param or config.DATE_PARAM
    try:
        values = parse_qs(urlparse(url).query).get(param, [])
    except ValueError:
        return None
    for value in values:
        d = parse_iso(value)
        if d:
            return d.isoformat()
    return None


def date_from_headings(headings: List[str], year: int) -> Optional[str]:
    for text in headings:
        iso = header_date(text, year)
        if iso:
            return iso
    return None


def date_from_text(text: str, year: int) -> Optional[str]:
    flat = " ".join((text or "").split())
    for m in _DAY_HEADER_ANYWHERE_RE.finditer(flat):
        iso = _date_from_match(m, year)
        if iso:
            return iso
    return None


def resolve_visible_date(content: ContentProvider, requested_iso: str | None = None) -> Optional[str]:
    """Best guess at the ISO date on screen, or None if the page does not say."""
    iso = date_from_url(content.navigation_url())
    if iso:
        logger.debug("Visible date %s from frame URL", iso)
        return iso

    year = year_from_iso(requested_iso)

    headings = [content.element_text(el) for el in content.select(HEADING_SELECTORS)]
    iso = date_from_headings([h for h in headings if h], year)
    if iso:
        logger.debug("Visible date %s from page heading", iso)
        return iso

    iso = date_from_text(content.visible_text(), year)
    if iso:
        logger.debug("Visible date %s from page text", iso)
        return iso

    logger.debug("Visible date not found on page")
    return None
