"""
Turn a row's badges and buttons into (status, open_spots).

The widget only shows a spot count for some classes. An open class without
a count keeps ``open_spots=None``: unknown is not the same as sold out.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

SPOTS_RE = re.compile(r"\b(\d+)\s*SPOTS?\b", re.I)
# Whole button captions only; class titles like "Full Body Reformer" are not actions
ACTION_RE = re.compile(r"^(?:book(?:\s+now)?|(?:join\s+)?waitlist|sold\s*out|full)$", re.I)
_WAITLIST_RE = re.compile(r"waitlist", re.I)
_FULL_RE = re.compile(r"sold\s*out|full", re.I)
_BOOK_RE = re.compile(r"book", re.I)


def spots_from_text(text: str) -> Optional[int]:
    m = SPOTS_RE.search(text or "")
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        return None


def resolve_status(badges: Iterable[str], row_text: str = "") -> Tuple[str, Optional[int]]:
    """
    Status precedence:

    1. '<N> SPOTS' badge    → open if N > 0 else full, open_spots = N
    2. 'waitlist' anywhere  → waitlist (open_spots 0 unless counted)
    3. 'sold out' / 'full'  → full (open_spots 0 unless counted)
    4. 'book' button        → open, open_spots stays unknown
    5. otherwise            → unknown
    """
    badges = [b.strip() for b in badges if b and b.strip()]
    spots_label = next((b for b in badges if SPOTS_RE.search(b)), None)
    action = next((b for b in badges if ACTION_RE.match(" ".join(b.split()))), "")

    status = "unknown"
    open_spots: Optional[int] = None

    if spots_label:
        open_spots = spots_from_text(spots_label) or 0
        status = "open" if open_spots > 0 else "full"

    if _WAITLIST_RE.search(action) or _WAITLIST_RE.search(row_text or ""):
        status = "waitlist"
        if open_spots is None:
            open_spots = 0
    elif _FULL_RE.search(action):
        status = "full"
        if open_spots is None:
            open_spots = 0
    elif _BOOK_RE.search(action) and open_spots is None:
        status = "open"

    return status, open_spots
