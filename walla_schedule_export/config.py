"""Read-only configuration from environment variables."""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _csv_env(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(s.strip() for s in raw.split(",") if s.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, not an integer; using %d", name, raw, default)
        return default


def _level_env(name: str, default: str) -> str:
    raw = (os.getenv(name) or default).strip().upper()
    if isinstance(logging.getLevelName(raw), int):
        return raw
    logger.warning("Ignoring %s=%r, not a logging level; using %s", name, raw, default)
    return default


# Widget identity
WALLA_UUID: str = os.getenv("WALLA_UUID", "3f4c5689-8468-47d5-a722-c0ab605b2da4")
WALLA_LOCATION_ID: str = os.getenv("WALLA_LOCATION_ID", "3589")

# Venue
VENUE_TZ: str = os.getenv("VENUE_TZ", "America/New_York")
VENUE_NAMES: tuple[str, ...] = _csv_env("VENUE_NAMES", "The Pearl,The Pearl Pilates Haven")

# Query parameter the frame URL carries the displayed day in
DATE_PARAM: str = os.getenv("DATE_PARAM", "start")

# Export
CLASS_MINUTES: int = _int_env("CLASS_MINUTES", 50)

# Logging
LOG_LEVEL: str = _level_env("LOG_LEVEL", "WARNING")
