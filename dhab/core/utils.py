"""
Utility functions for Dhab.
"""

import time
from datetime import datetime, timezone
from typing import Optional

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def today_iso() -> str:
    """Current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def format_time_ago(timestamp: int, now: Optional[int] = None) -> str:
    """
    Convert an epoch-ms timestamp to a relative label.

    Examples:
        30 seconds ago -> "Just now"
        1 minute ago   -> "1 minute ago"
        5 hours ago    -> "5 hours ago"
        2 days ago     -> "2 days ago"

    Args:
        timestamp: Epoch milliseconds of the event
        now: Epoch milliseconds to measure from (defaults to current time)

    Returns:
        Human-readable relative time
    """
    if now is None:
        now = now_ms()

    diff = now - timestamp
    minutes = diff // MS_PER_MINUTE
    hours = diff // MS_PER_HOUR
    days = diff // MS_PER_DAY

    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    if minutes > 0:
        return _plural(minutes, "minute")
    return "Just now"


def format_currency(amount: float) -> str:
    """
    Format a dollar amount.

    Examples:
        8 -> "$8.00"
        1234.5 -> "$1,234.50"
        -3 -> "-$3.00"
    """
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"
