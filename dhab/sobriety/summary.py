"""
Timer and savings summary for a stored sobriety record.
"""

from datetime import datetime
from typing import Optional

from dhab.core.config import Config
from dhab.sobriety.savings import SavingsProjection
from dhab.sobriety.timer import elapsed_since, milestone_label


def build_summary(config: Config, record: dict, now: Optional[datetime] = None) -> dict:
    """
    Everything the timer screen shows for one record.

    Args:
        config: Application config (timezone, default cost)
        record: Record dict as returned by the sobriety store
        now: Moment to measure to (defaults to current time)

    Returns:
        Dict with addiction, timer, milestone, rings and savings
    """
    display = elapsed_since(
        record["startDate"],
        record.get("startTime"),
        tz=config.timezone,
        now=now,
    )

    daily_cost = record.get("dailyCost")
    if daily_cost is None:
        daily_cost = config.default_daily_cost

    savings = SavingsProjection.from_timer(float(daily_cost), display)

    return {
        "fid": record.get("fid"),
        "addiction": record["addiction"],
        "startDate": record["startDate"],
        "startTime": record.get("startTime"),
        "timer": display.to_dict(),
        "rings": display.ring_progress(),
        "milestone": milestone_label(display.days),
        "savings": savings.to_dict(),
    }
