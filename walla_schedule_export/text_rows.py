"""
Plain-text strategy: parse the frame's visible text line by line.

Used when the markup gives nothing usable. The text of one day looks like:

    WEDNESDAY, SEPTEMBER 3
    9:00 AM
    Mat Pilates
    w/ Jane Doe
    Drop-in: $35
    3 SPOTS
    Book
    10:15 AM
    ...

First the target day's section is cut out of the text, then the lines are
folded into entries: a time line opens an entry and every following line
fills at most one field of it, in the order of _LINE_RULES.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from functools import partial, reduce
from typing import Callable, List, Optional, Tuple

from .content import ContentProvider
from .fields import (
    DROP_IN_RE,
    INSTRUCTOR_LINE_RE,
    MIN_NAME_LENGTH,
    TIME_LINE_RE,
    find_price,
    format_time,
    is_boilerplate,
)
from .models import ScheduleEntry
from .visible_date import DAY_HEADER_RE, header_date, header_variants, parse_iso

logger = logging.getLogger(__name__)

_WAITLIST_LINE_RE = re.compile(r"^Waitlist$", re.I)
_FULL_LINE_RE = re.compile(r"^(?:Sold\s*Out|Full)$", re.I)
_SPOTS_LINE_RE = re.compile(r"^(\d+)\s*SPOTS?$", re.I)
_BOOK_LINE_RE = re.compile(r"^Book$", re.I)


# ──────────────────────────────────────────────────────────────────
#  Day section
# ──────────────────────────────────────────────────────────────────

def normalize_lines(text: str) -> List[str]:
    lines = (" ".join(line.split()) for line in (text or "").splitlines())
    return [line for line in lines if line]


def _variant_patterns(day: date) -> List[re.Pattern]:
    return [re.compile(rf"\b{re.escape(v)}\b") for v in header_variants(day)]


def day_section(lines: List[str], day: Optional[date]) -> List[str]:
    """
    Lines from the day's header up to the next day header.

    Without a recognisable header the section starts at the top; without a
    following header it runs to the end.
    """
    if day is None:
        return lines
    patterns = _variant_patterns(day)

    def names_target(line: str) -> bool:
        return any(p.search(line) for p in patterns) or header_date(line, day.year) == day.isoformat()

    start = next((i for i, line in enumerate(lines) if names_target(line)), 0)
    end = next(
        (i for i in range(start + 1, len(lines))
         if DAY_HEADER_RE.match(lines[i]) and not names_target(lines[i])),
        len(lines),
    )
    return lines[start:end]


# ──────────────────────────────────────────────────────────────────
#  Line scan
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class _Draft:
    time: str
    class_name: str = ""
    instructor: str = ""
    status: str = "unknown"
    open_spots: Optional[int] = None
    price: Optional[Decimal] = None
    price_text: Optional[str] = None

    def complete(self) -> bool:
        return bool(self.time) and (bool(self.class_name) or self.status != "unknown")

    def to_entry(self, day_iso: Optional[str]) -> ScheduleEntry:
        return ScheduleEntry(
            date=day_iso,
            time=self.time,
            class_name=self.class_name,
            instructor=self.instructor,
            status=self.status,
            open_spots=self.open_spots,
            price=self.price,
            price_text=self.price_text,
        )


@dataclass(frozen=True)
class _Scan:
    entries: Tuple[ScheduleEntry, ...] = ()
    draft: Optional[_Draft] = None


def _keep(draft: _Draft, _m) -> _Draft:
    return draft


def _set_instructor(draft: _Draft, m: re.Match) -> _Draft:
    return replace(draft, instructor=m.group(1).strip())


def _zero_if_unset(draft: _Draft) -> int:
    return draft.open_spots if draft.open_spots is not None else 0


def _set_waitlist(draft: _Draft, _m) -> _Draft:
    return replace(draft, status="waitlist", open_spots=_zero_if_unset(draft))


def _set_full(draft: _Draft, _m) -> _Draft:
    return replace(draft, status="full", open_spots=_zero_if_unset(draft))


def _set_spots(draft: _Draft, m: re.Match) -> _Draft:
    n = int(m.group(1))
    return replace(draft, open_spots=n, status="open" if n > 0 else "full")


def _set_bookable(draft: _Draft, _m) -> _Draft:
    if draft.open_spots is not None:
        return draft
    return replace(draft, status="open")


def _set_name(draft: _Draft, line: str) -> _Draft:
    return replace(draft, class_name=line)


def _unclaimed_name(line: str, draft: _Draft) -> Optional[str]:
    if draft.class_name or len(line) < MIN_NAME_LENGTH or DROP_IN_RE.match(line):
        return None
    return line


def _on_line(pattern: re.Pattern) -> Callable[[str, _Draft], Optional[re.Match]]:
    return lambda line, _draft: pattern.match(line)


# (predicate, setter); first predicate that matches owns the line
_LINE_RULES = (
    (lambda line, _draft: is_boilerplate(line), _keep),
    (_on_line(DROP_IN_RE), _keep),
    (_on_line(INSTRUCTOR_LINE_RE), _set_instructor),
    (_on_line(_WAITLIST_LINE_RE), _set_waitlist),
    (_on_line(_FULL_LINE_RE), _set_full),
    (_on_line(_SPOTS_LINE_RE), _set_spots),
    (_on_line(_BOOK_LINE_RE), _set_bookable),
    (_unclaimed_name, _set_name),
)


def _apply_line(draft: _Draft, line: str) -> _Draft:
    price, price_text = find_price(line)
    if price is not None:
        draft = replace(draft, price=price, price_text=price_text)
    for predicate, setter in _LINE_RULES:
        m = predicate(line, draft)
        if m:
            return setter(draft, m)
    return draft


def _flush(scan: _Scan, day_iso: Optional[str]) -> Tuple[ScheduleEntry, ...]:
    if scan.draft is not None and scan.draft.complete():
        return scan.entries + (scan.draft.to_entry(day_iso),)
    return scan.entries


def _step(scan: _Scan, line: str, day_iso: Optional[str]) -> _Scan:
    m = TIME_LINE_RE.match(line)
    if m:
        return _Scan(entries=_flush(scan, day_iso), draft=_Draft(time=format_time(m.group(1), m.group(2))))
    if scan.draft is None:
        return scan
    return replace(scan, draft=_apply_line(scan.draft, line))


def parse_plain_text(text: str, day_iso: Optional[str]) -> List[ScheduleEntry]:
    """Entries of the given day found in the frame's flattened text."""
    section = day_section(normalize_lines(text), parse_iso(day_iso))
    scan = reduce(partial(_step, day_iso=day_iso), section, _Scan())
    return list(_flush(scan, day_iso))


def extract_text_rows(content: ContentProvider, day_iso: Optional[str]) -> List[ScheduleEntry]:
    text = content.visible_text()
    if not text:
        logger.debug("Frame has no visible text")
        return []
    return parse_plain_text(text, day_iso)
