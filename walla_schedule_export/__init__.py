"""
Extract class schedules from the HelloWalla booking widget.
"""
from __future__ import annotations

__version__ = "0.3.0"

from .content import ContentUnavailableError, HtmlContent, SeleniumContent, TextContent
from .models import ExtractionResult, ScheduleEntry
from .pipeline import extract_schedule

__all__ = [
    "ContentUnavailableError",
    "ExtractionResult",
    "HtmlContent",
    "ScheduleEntry",
    "SeleniumContent",
    "TextContent",
    "extract_schedule",
]
