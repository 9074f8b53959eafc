"""
Schedule records produced by the extraction pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class ScheduleEntry:
    """One class offering on one day."""

    date: Optional[str]  # "2025-09-03"
    time: str  # "9:00 AM"
    class_name: str
    instructor: str = ""
    status: str = "unknown"  # open | full | waitlist | unknown
    open_spots: Optional[int] = None  # None = count not shown, not zero
    price: Optional[Decimal] = None
    price_text: Optional[str] = None  # "$35"

    @property
    def key(self) -> tuple:
        return (self.date, self.time, self.class_name)

    def to_dict(self) -> dict:
        price = None
        if self.price is not None:
            price = int(self.price) if self.price == self.price.to_integral_value() else float(self.price)
        return {
            "date": self.date,
            "time": self.time,
            "class_name": self.class_name,
            "instructor": self.instructor,
            "status": self.status,
            "open_spots": self.open_spots,
            "price": price,
            "price_text": self.price_text,
        }


@dataclass
class ExtractionResult:
    """
    Outcome of one extraction call.

    ``visible_date`` is None when the displayed day could not be read from the
    page; ``day_mismatch`` is then False but means "unknown", see
    :attr:`date_confirmed`.
    """

    requested_date: Optional[str]
    visible_date: Optional[str]
    day_mismatch: bool
    strategy_used: str
    entries: List[ScheduleEntry] = field(default_factory=list)

    @property
    def date_confirmed(self) -> bool:
        return self.visible_date is not None

    def to_dict(self) -> dict:
        return {
            "requested_date": self.requested_date,
            "visible_date": self.visible_date,
            "day_mismatch": self.day_mismatch,
            "date_confirmed": self.date_confirmed,
            "strategy_used": self.strategy_used,
            "entries": [e.to_dict() for e in self.entries],
        }
