"""Month key helpers.

A month key is a ``YYYY-MM`` string naming a budget period. Expenses are
matched to a budget by truncating their ISO date to its month key.
"""

from __future__ import annotations

import calendar
import re
from datetime import date
from typing import Optional, Tuple

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def parse_month_key(key: str) -> Tuple[int, int]:
    match = _MONTH_KEY_RE.match(key or "")
    if not match:
        raise ValueError(f"invalid month key '{key}' (expected YYYY-MM)")
    return int(match.group(1)), int(match.group(2))


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def current_month_key(today: Optional[date] = None) -> str:
    return month_key(today or date.today())


def last_day(key: str) -> date:
    year, month = parse_month_key(key)
    return date(year, month, calendar.monthrange(year, month)[1])


def previous_month(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def following_month(key: str) -> str:
    year, month = parse_month_key(key)
    if month == 12:
        return f"{year + 1:04d}-01"
    return f"{year:04d}-{month + 1:02d}"


def is_future_month(key: str, today: Optional[date] = None) -> bool:
    # Zero-padded keys compare chronologically as strings.
    parse_month_key(key)
    return key > current_month_key(today)


def next_month(key: str, today: Optional[date] = None) -> Optional[str]:
    """Return the successor of ``key`` or None when it would lie after the current month."""
    candidate = following_month(key)
    if is_future_month(candidate, today):
        return None
    return candidate


def month_label(key: str) -> str:
    year, month = parse_month_key(key)
    return f"{calendar.month_name[month]} {year}"


def days_elapsed_in_month(key: str, today: Optional[date] = None) -> int:
    """Days of ``key`` that have started by ``today``.

    The current month counts through today, past months count in full and
    future months count zero.
    """
    today = today or date.today()
    current = current_month_key(today)
    if key == current:
        return today.day
    if key > current:
        return 0
    return last_day(key).day


__all__ = [
    "parse_month_key",
    "month_key",
    "current_month_key",
    "last_day",
    "previous_month",
    "following_month",
    "is_future_month",
    "next_month",
    "month_label",
    "days_elapsed_in_month",
]
