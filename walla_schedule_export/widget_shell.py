"""
Helpers for whoever loads the widget before extraction.

- build_widget_shell: minimal local page that embeds the widget, for venues
  whose own site is slow or unavailable
- widget_frame_url / with_date_params: find the widget iframe and pin the day
  it shows through its URL
- day_tab_labels: captions of the day tabs to click when the URL is ignored
"""
from __future__ import annotations

import html
from typing import Iterable, List, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from . import config
from .visible_date import MONTHS, WEEKDAYS, parse_iso, pick_iso

WIDGET_HOST = "widget.hellowalla.com"
LOADER_URL = f"https://{WIDGET_HOST}/loader/v1/walla-widget-loader.js"


def build_widget_shell(
    start: str | None = None,
    end: str | None = None,
    widget_id: str | None = None,
    location_id: str | None = None,
) -> str:
    """Return an HTML document that loads the classes page of the widget."""
    attrs = {
        "data-walla-id": widget_id or config.WALLA_UUID,
        "data-walla-page": "classes",
        "data-walla-locationid": location_id or config.WALLA_LOCATION_ID,
        "data-start": pick_iso(start),
        "data-end": pick_iso(end),
    }
    attr_html = " ".join(f'{k}="{html.escape(v, quote=True)}"' for k, v in attrs.items())
    return (
        '<!doctype html><html><head><meta charset="utf-8"/></head><body>'
        f'<div class="walla-widget-root" {attr_html}></div>'
        "<script>(function(w,a,l,la,j,s){"
        'const t=a.getElementById("walla-widget-script"); if(t) return;'
        'j=a.createElement(l); j.async=1; j.src=la; j.id="walla-widget-script";'
        "s=a.getElementsByTagName(l)[0]||a.body; s.parentNode.insertBefore(j,s);"
        f'}})(window,document,"script","{LOADER_URL}");</script>'
        "</body></html>"
    )


def is_widget_frame(url: str) -> bool:
    return WIDGET_HOST in (urlparse(url or "").netloc or "").lower()


def widget_frame_url(frame_urls: Iterable[str]) -> Optional[str]:
    """First of the page's iframe URLs that belongs to the widget."""
    return next((url for url in frame_urls if is_widget_frame(url)), None)


def with_date_params(url: str, start: str | None = None, end: str | None = None) -> str:
    """Frame URL with its start/end query parameters set to the given days."""
    parts = urlparse(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    start_iso, end_iso = pick_iso(start), pick_iso(end)
    if start_iso:
        query[config.DATE_PARAM] = start_iso
    if end_iso:
        query["end"] = end_iso
    return urlunparse(parts._replace(query=urlencode(query)))


def day_tab_labels(day_iso: str) -> List[str]:
    """'2025-09-03' → ['Wed Sep 3', 'Sep 3', 'Wed 3']."""
    day = parse_iso(day_iso)
    if day is None:
        return []
    dow = WEEKDAYS[day.weekday()][:3]
    mon = MONTHS[day.month - 1][:3]
    return [f"{dow} {mon} {day.day}", f"{mon} {day.day}", f"{dow} {day.day}"]
