from __future__ import annotations

from datetime import date, datetime

from ..core.constants import TIME_LABEL_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, TIME_LABEL_FORMAT).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_time_label(day: date, clock: str = "") -> str:
    """Build a lexicographically sortable time label, e.g. ``2024-08-10 14:30``."""
    label = day.strftime(TIME_LABEL_FORMAT)
    clock = (clock or "").strip()
    return f"{label} {clock}" if clock else label
