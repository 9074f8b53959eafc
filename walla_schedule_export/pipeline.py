"""
Public API: extract one day's schedule from the rendered widget.

Strategies are tried in order of how much they trust the markup:

1. dom-day-scoped: rows under the displayed day's header
2. dom-global:     rows anywhere in the frame
3. text:           line scan of the frame's visible text

The first one that yields any entry wins. An empty result from all three is
a valid answer (a day can have no classes).
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .content import ContentProvider
from .dom_rows import extract_day_scoped, extract_global
from .models import ExtractionResult, ScheduleEntry
from .text_rows import extract_text_rows
from .visible_date import pick_iso, resolve_visible_date

logger = logging.getLogger(__name__)

Strategy = Callable[[ContentProvider, Optional[str]], List[ScheduleEntry]]

STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("dom-day-scoped", extract_day_scoped),
    ("dom-global", extract_global),
    ("text", extract_text_rows),
)


def dedupe_entries(entries: Iterable[ScheduleEntry]) -> List[ScheduleEntry]:
    """Drop repeats of (date, time, class_name), keeping the first one seen."""
    seen: set[tuple] = set()
    unique: List[ScheduleEntry] = []
    for entry in entries:
        if entry.key in seen:
            continue
        seen.add(entry.key)
        unique.append(entry)
    return unique


def run_strategies(
    content: ContentProvider,
    day_iso: Optional[str],
    strategies: Tuple[Tuple[str, Strategy], ...] = STRATEGIES,
) -> Tuple[str, List[ScheduleEntry]]:
    """Return (name, entries) of the first strategy with results."""
    name = strategies[-1][0]
    for name, strategy in strategies:
        entries = dedupe_entries(strategy(content, day_iso))
        logger.debug("Strategy %s found %d entries", name, len(entries))
        if entries:
            return name, entries
    return name, []


def extract_schedule(requested_date: str | None, content: ContentProvider) -> ExtractionResult:
    """
    Extract the schedule shown in the widget frame.

    :param requested_date: Day the caller navigated to (YYYY-MM-DD).
    :param content: Provider for the already rendered widget frame.
    :returns: ExtractionResult; entries are labelled with the visible date
              when the page shows one, else with the requested date.
    """
    requested_iso = pick_iso(requested_date) or None

    visible_iso = resolve_visible_date(content, requested_iso)
    day_mismatch = bool(requested_iso and visible_iso and visible_iso != requested_iso)
    if day_mismatch:
        logger.warning("Widget shows %s but %s was requested", visible_iso, requested_iso)

    day_iso = visible_iso or requested_iso
    strategy_used, entries = run_strategies(content, day_iso)
    logger.info("Extracted %d entries for %s using %s", len(entries), day_iso, strategy_used)

    return ExtractionResult(
        requested_date=requested_iso,
        visible_date=visible_iso,
        day_mismatch=day_mismatch,
        strategy_used=strategy_used,
        entries=entries,
    )
