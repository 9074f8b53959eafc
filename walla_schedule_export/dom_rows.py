"""
DOM strategy: read schedule rows out of the rendered widget markup.

Row discovery casts a wide net (any list item / table row / "row"-ish
element with text) and relies on the time-of-day token to tell real class
rows from layout noise. The widget's markup changes often; class names and
test ids below are the ones seen so far.

Two entry points share the same row parser:

- extract_day_scoped: only rows inside the displayed day's section
- extract_global:     every row in the frame
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Sequence

from .content import ContentProvider
from .fields import (
    INSTRUCTOR_LINE_RE,
    MIN_NAME_LENGTH,
    TIME_RE,
    find_instructor,
    find_price,
    find_time,
    is_boilerplate,
    is_drop_in,
)
from .models import ScheduleEntry
from .status import ACTION_RE, resolve_status
from .visible_date import DAY_HEADER_RE, HEADING_SELECTORS, header_date, parse_iso

logger = logging.getLogger(__name__)

ROW_SELECTORS = (
    '[data-testid="class-row"]', ".class-row", ".schedule-row", ".class-item",
    "li", "tr", ".row",
)
TITLE_SELECTORS = (
    ".class-title", '[data-testid="class-name"]', "a", "h3", "h4", "[role=heading]",
)
BADGE_SELECTORS = ("span", "div", "button")

# How far up from a day header to look for the elements that follow it
MAX_SCOPE_CLIMB = 3


@dataclass(frozen=True)
class RawRow:
    text: str
    title: str
    badges: tuple


# ──────────────────────────────────────────────────────────────────
#  Field parser
# ──────────────────────────────────────────────────────────────────

def _is_title(line: str) -> bool:
    if len(line) < MIN_NAME_LENGTH:
        return False
    if TIME_RE.search(line) or is_drop_in(line) or is_boilerplate(line):
        return False
    if ACTION_RE.match(line) or INSTRUCTOR_LINE_RE.match(line):
        return False
    return True


def _title_from_lines(text: str) -> str:
    for line in text.split("\n"):
        line = " ".join(line.split())
        if _is_title(line):
            return line
    return ""


def parse_row(row: RawRow, day_iso: Optional[str]) -> Optional[ScheduleEntry]:
    """
    Build an entry from one row, or None when the row has no time of day
    or has neither a title nor a readable status.
    """
    time = find_time(row.text)
    if not time:
        return None

    class_name = row.title if _is_title(row.title) else _title_from_lines(row.text)

    price, price_text = find_price(row.text)
    if price is None:
        for badge in row.badges:
            price, price_text = find_price(badge)
            if price is not None:
                break

    status, open_spots = resolve_status(row.badges, row.text)
    if not class_name and status == "unknown":
        return None

    return ScheduleEntry(
        date=day_iso,
        time=time,
        class_name=class_name,
        instructor=find_instructor(row.text),
        status=status,
        open_spots=open_spots,
        price=price,
        price_text=price_text,
    )


# ──────────────────────────────────────────────────────────────────
#  Row discovery
# ──────────────────────────────────────────────────────────────────

def read_row(content: ContentProvider, element: Any) -> Optional[RawRow]:
    text = content.element_text(element)
    if not text or not text.strip():
        return None
    titles = content.select(TITLE_SELECTORS, root=element)
    title = " ".join(content.element_text(titles[0]).split()) if titles else ""
    badges = tuple(content.element_text(b) for b in content.select(BADGE_SELECTORS, root=element))
    return RawRow(text=text, title=title, badges=badges)


def find_row_candidates(content: ContentProvider, roots: Optional[Sequence[Any]] = None) -> List[Any]:
    if roots is None:
        return content.select(ROW_SELECTORS)
    found: List[Any] = []
    for root in roots:
        if content.matches(root, ROW_SELECTORS):
            found.append(root)
        found.extend(content.select(ROW_SELECTORS, root=root))
    return found


def _is_target_header(text: str, day: date) -> bool:
    return header_date(text, day.year) == day.isoformat()


def _mentions_other_day(text: str, day: date) -> bool:
    for line in text.split("\n"):
        line = " ".join(line.split())
        if DAY_HEADER_RE.match(line) and not _is_target_header(line, day):
            return True
    return False


def day_section_roots(content: ContentProvider, day_iso: Optional[str]) -> List[Any]:
    """
    Elements between the day's header and the next day's header.

    If the header has no following siblings (e.g. it is wrapped on its own)
    its ancestors are tried, up to MAX_SCOPE_CLIMB levels.
    """
    day = parse_iso(day_iso)
    if day is None:
        return []

    header = next(
        (el for el in content.select(HEADING_SELECTORS)
         if _is_target_header(content.element_text(el), day)),
        None,
    )
    if header is None:
        return []

    node = header
    for _ in range(MAX_SCOPE_CLIMB):
        siblings = content.following_siblings(node)
        if siblings:
            section = []
            for sib in siblings:
                if _mentions_other_day(content.element_text(sib), day):
                    break
                section.append(sib)
            return section
        node = content.parent(node)
        if node is None:
            break
    return []


def _entries_from(content: ContentProvider, elements: Sequence[Any], day_iso: Optional[str]) -> List[ScheduleEntry]:
    entries: List[ScheduleEntry] = []
    for el in elements:
        row = read_row(content, el)
        if row is None:
            continue
        entry = parse_row(row, day_iso)
        if entry is not None:
            entries.append(entry)
    return entries


# ──────────────────────────────────────────────────────────────────
#  Strategies
# ──────────────────────────────────────────────────────────────────

def extract_day_scoped(content: ContentProvider, day_iso: Optional[str]) -> List[ScheduleEntry]:
    roots = day_section_roots(content, day_iso)
    if not roots:
        logger.debug("No day section found for %s", day_iso)
        return []
    return _entries_from(content, find_row_candidates(content, roots), day_iso)


def extract_global(content: ContentProvider, day_iso: Optional[str]) -> List[ScheduleEntry]:
    return _entries_from(content, find_row_candidates(content), day_iso)
