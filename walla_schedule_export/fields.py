"""
Field patterns shared by the DOM and plain-text parsers.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from . import config

# "9:00 AM" anywhere in a row / as a whole line
TIME_RE = re.compile(r"\b([0-1]?\d:[0-5]\d)\s*([AP]M)\b", re.I)
TIME_LINE_RE = re.compile(r"^([0-1]?\d:[0-5]\d)\s*([AP]M)$", re.I)

PRICE_RE = re.compile(r"(?:Drop-?in:?\s*)?\$([0-9]+(?:\.[0-9]{2})?)", re.I)
DROP_IN_RE = re.compile(r"^Drop-?in:\s*\$\d[\d.,]*", re.I)

INSTRUCTOR_RE = re.compile(r"w/\s*([A-Za-z][A-Za-z .'-]+)", re.I)
INSTRUCTOR_LINE_RE = re.compile(r"^w/\s*([A-Za-z][A-Za-z .'-]+)", re.I)

# Widget chrome that shows up between rows in the rendered text
BOILERPLATE = frozenset({
    "EDT", "EST", "In-Person", "map", "Log In", "Daily", "Weekly", "List",
    "Filter by", "Type", "Location", "Instructor", "Name", "Category", "All",
}) | frozenset(config.VENUE_NAMES)

MIN_NAME_LENGTH = 3


def format_time(hm: str, meridiem: str) -> str:
    return f"{hm} {meridiem.upper()}"


def find_time(text: str) -> Optional[str]:
    m = TIME_RE.search(text or "")
    return format_time(m.group(1), m.group(2)) if m else None


def find_price(text: str) -> Tuple[Optional[Decimal], Optional[str]]:
    """'Drop-in: $35' → (Decimal('35'), '$35')."""
    m = PRICE_RE.search(text or "")
    if not m:
        return None, None
    try:
        return Decimal(m.group(1)), f"${m.group(1)}"
    except InvalidOperation:
        return None, None


def find_instructor(text: str) -> str:
    m = INSTRUCTOR_RE.search(text or "")
    return m.group(1).strip() if m else ""


def is_boilerplate(line: str) -> bool:
    return line in BOILERPLATE


def is_drop_in(line: str) -> bool:
    return bool(DROP_IN_RE.match(line))
