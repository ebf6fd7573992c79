"""
Date suffix parsing for index names.

Index names carry their date as a trailing token, e.g. ``app-logs-2024.01.31``
for the ``%Y.%m.%d`` pattern. The pattern is turned into an end-anchored
regular expression with fixed-width numeric fields, and the matched token is
then validated with ``datetime.strptime`` so that month and day bounds are
checked against the calendar.
"""

import re
from datetime import date, datetime
from functools import lru_cache
from typing import Optional, Pattern

# strftime directive -> fixed-width regex
_DIRECTIVES = {
    "Y": r"\d{4}",
    "y": r"\d{2}",
    "m": r"\d{2}",
    "d": r"\d{2}",
    "H": r"\d{2}",
    "M": r"\d{2}",
    "S": r"\d{2}",
    "j": r"\d{3}",
    "%": "%",
}


class UnsupportedDatePattern(ValueError):
    """Raised when a date pattern uses a directive that cannot be matched."""


@lru_cache(maxsize=64)
def suffix_regex(date_pattern: str) -> Pattern[str]:
    """Build the end-anchored regex that captures a date suffix."""
    parts = []
    i = 0
    while i < len(date_pattern):
        char = date_pattern[i]
        if char == "%":
            if i + 1 >= len(date_pattern):
                raise UnsupportedDatePattern(f"Dangling '%' in date pattern {date_pattern!r}")
            directive = date_pattern[i + 1]
            if directive not in _DIRECTIVES:
                raise UnsupportedDatePattern(f"Unsupported directive %{directive} in {date_pattern!r}")
            parts.append(_DIRECTIVES[directive])
            i += 2
        else:
            parts.append(re.escape(char))
            i += 1
    return re.compile("(" + "".join(parts) + r")\Z")


def extract_suffix_date(name: str, date_pattern: str) -> Optional[date]:
    """
    Parse the trailing date token of an index name.

    Returns None when the name does not end with a token shaped like
    ``date_pattern`` or when the token is not a valid calendar date.
    """
    if not date_pattern:
        return None
    try:
        regex = suffix_regex(date_pattern)
    except UnsupportedDatePattern:
        return None

    match = regex.search(name)
    if match is None:
        return None

    try:
        return datetime.strptime(match.group(1), date_pattern).date()
    except ValueError:
        return None


def format_suffix_date(value: date, date_pattern: str) -> str:
    """Render a date the way it appears as an index suffix."""
    return value.strftime(date_pattern)


def age_in_days(suffix_date: date, today: date) -> int:
    """Whole days between the suffix date and ``today`` (negative for future dates)."""
    return (today - suffix_date).days
