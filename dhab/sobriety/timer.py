"""
Elapsed-time calculations for the sobriety timer.

The start moment is stored as the date and time the user typed in,
so it is interpreted in the configured timezone.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


@dataclass
class TimerDisplay:
    """Elapsed time split into display units."""
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @property
    def total_days(self) -> float:
        """Whole days plus the fraction covered by the hours."""
        return self.days + self.hours / 24

    def ring_progress(self) -> dict:
        """Fill fraction of the hour, minute and second rings."""
        return {
            "hours": self.hours / 24,
            "minutes": self.minutes / 60,
            "seconds": self.seconds / 60,
        }

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
        }


def parse_start(start_date: str, start_time: Optional[str], tz: str = "UTC") -> datetime:
    """
    Combine stored date and time into an aware datetime.

    An empty start time means midnight.
    """
    clock = start_time or "00:00"
    naive = datetime.strptime(f"{start_date}T{clock}", "%Y-%m-%dT%H:%M")
    return naive.replace(tzinfo=ZoneInfo(tz))


def elapsed(start: datetime, now: Optional[datetime] = None) -> TimerDisplay:
    """
    Break the time since start into days, hours, minutes and seconds.

    A start in the future shows as zero.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    total = int((now - start).total_seconds())
    if total < 0:
        return TimerDisplay()

    return TimerDisplay(
        days=total // SECONDS_PER_DAY,
        hours=(total // SECONDS_PER_HOUR) % 24,
        minutes=(total // SECONDS_PER_MINUTE) % 60,
        seconds=total % 60,
    )


def elapsed_since(
    start_date: str,
    start_time: Optional[str] = None,
    tz: str = "UTC",
    now: Optional[datetime] = None,
) -> TimerDisplay:
    """Elapsed time for a stored start date and time."""
    return elapsed(parse_start(start_date, start_time, tz), now)


def milestone_label(days: int) -> str:
    """Badge text for the current streak."""
    if days >= 21:
        return "3 Weeks"
    if days >= 14:
        return "2 Weeks"
    if days >= 7:
        return "1 Week"
    if days >= 1:
        return f"{days} Day{'s' if days > 1 else ''}"
    return "Just Started"
