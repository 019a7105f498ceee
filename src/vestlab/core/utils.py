"""
Calendar utilities for VestLab.

All dates in VestLab are abstract calendar days carried as ISO ``YYYY-MM-DD``
strings. There is no time of day and no timezone: arithmetic treats every
date as midnight UTC. ISO strings order lexicographically the same way the
dates they name order chronologically, so the engine compares them directly
with ``<``/``<=`` and only parses them when it needs a day count.
"""

from __future__ import annotations

import re
from datetime import date

from .errors import ConfigError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_iso_date(value: object) -> bool:
    """True when ``value`` is a ``YYYY-MM-DD`` string naming a real calendar day."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_date(date_str: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` string into a ``datetime.date``.

    **Args:**
        date_str: ISO calendar date

    **Returns:**
        The corresponding ``date``

    **Raises:**
        ConfigError: If the string is not a valid ISO calendar date
    """
    if not isinstance(date_str, str) or not _ISO_DATE.match(date_str):
        raise ConfigError(f"Expected a YYYY-MM-DD date string, got {date_str!r}")
    try:
        return date.fromisoformat(date_str)
    except ValueError as exc:
        raise ConfigError(f"Invalid calendar date {date_str!r}") from exc


def format_date(value: date) -> str:
    """Format a ``date`` as ``YYYY-MM-DD``."""
    return value.isoformat()


def today() -> str:
    """Today's date as ``YYYY-MM-DD``."""
    return date.today().isoformat()


def days_between(date1: str, date2: str) -> int:
    """
    Exact number of calendar days from ``date1`` to ``date2``.

    Negative when ``date2`` is before ``date1``. Leap days are counted, so
    ``days_between("2024-01-01", "2024-07-01") == 182`` while the same span
    in 2023 is 181 days.

    **Example:**
        ```python
        from vestlab.core.utils import days_between

        days_between("2023-01-01", "2023-07-01")  # 181
        days_between("2024-07-01", "2024-01-01")  # -182
        ```
    """
    return (parse_date(date2) - parse_date(date1)).days


def is_on_or_before(date1: str, date2: str) -> bool:
    """True if ``date1 <= date2``."""
    return date1 <= date2


def is_before(date1: str, date2: str) -> bool:
    """True if ``date1 < date2``."""
    return date1 < date2


def get_year(date_str: str) -> int:
    """Year component of a ``YYYY-MM-DD`` string."""
    return int(date_str[:4])


def start_of_year(year: int) -> str:
    """``YYYY-01-01`` for the given year."""
    return f"{year:04d}-01-01"


def end_of_year(year: int) -> str:
    """``YYYY-12-31`` for the given year."""
    return f"{year:04d}-12-31"


def is_leap_year(year: int) -> bool:
    """Gregorian rule: divisible by 4 and not by 100, or divisible by 400."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    """366 for leap years, 365 otherwise."""
    return 366 if is_leap_year(year) else 365
