"""
Utility functions for the Imihigo performance contract tracker.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from imihigo.constants import QUARTERS
from imihigo.exceptions import InvalidQuarterError

# Leading numeric prefix, the way a browser's parseFloat reads "500 tons"
_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def parse_number(value: Any) -> float:
    """
    Coerce an entered figure to a non-negative number.

    Blank, missing or unparsable input becomes 0. Negative figures are
    clamped to 0 since targets and achievements are counts of delivered work.

    Args:
        value: Raw value (number, numeric string, blank or None).

    Returns:
        A finite float >= 0.

    Examples:
        >>> parse_number("250")
        250.0
        >>> parse_number("")
        0.0
        >>> parse_number("n/a")
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    return max(0.0, _finite(number))


def parse_baseline(raw: Any) -> float:
    """
    Best-effort numeric reading of a free-text baseline.

    Numbers pass through; strings are read up to the first non-numeric
    character ("500 tons" -> 500). Anything else reads as 0.

    Args:
        raw: Baseline as authored (string or number).

    Returns:
        A finite float.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return _finite(float(raw))
    match = _NUMERIC_PREFIX.match(str(raw).strip())
    if not match:
        return 0.0
    return _finite(float(match.group(0)))


def parse_count(value: Any) -> int:
    """
    Coerce a pillar count to an integer >= 1.

    Args:
        value: Raw count (int, numeric string, blank or None).

    Returns:
        The count, never less than 1.
    """
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return max(1, value)
    try:
        return max(1, int(float(str(value).strip())))
    except (TypeError, ValueError, OverflowError):
        return 1


def validate_quarter(quarter: Any) -> int:
    """
    Validate a quarter number.

    Raises:
        InvalidQuarterError: If quarter is not one of 1, 2, 3, 4.
    """
    if isinstance(quarter, bool) or quarter not in QUARTERS:
        raise InvalidQuarterError(f"Quarter must be one of 1, 2, 3, 4 (got {quarter!r}).")
    return int(quarter)


def current_quarter(today: Optional[date] = None) -> int:
    """
    Get the calendar quarter for a date.

    Args:
        today: Date to classify. Defaults to today.

    Returns:
        1 for Jan-Mar, 2 for Apr-Jun, 3 for Jul-Sep, 4 for Oct-Dec.
    """
    today = today or datetime.now().date()
    return (today.month - 1) // 3 + 1


def format_date(value: date) -> str:
    """
    Format a date to the standard ISO 8601 format.

    Returns:
        A string in YYYY-MM-DD format.
    """
    return value.strftime("%Y-%m-%d")


def format_number(value: float) -> str:
    """Render a figure without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
