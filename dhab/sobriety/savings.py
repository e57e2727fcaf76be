"""
Money saved by not spending on the habit.

Projections are linear in the daily cost the user configured.
"""

import math
from dataclasses import dataclass

from dhab.core.utils import format_currency
from dhab.sobriety.timer import TimerDisplay

DAYS_PER_MONTH = 30.44
DAYS_PER_YEAR = 365
BILL_VALUE = 20
BILL_SLOTS = 10


def motivational_message(yearly_savings: float) -> str:
    """Pick an encouragement line based on the yearly projection."""
    if yearly_savings >= 5000:
        return "You're saving enough for an amazing vacation every year!"
    if yearly_savings >= 2000:
        return "You're saving enough to buy a new smartphone every year!"
    if yearly_savings >= 1000:
        return "You're saving enough for a nice weekend getaway every year!"
    if yearly_savings >= 500:
        return "You're building healthy savings habits!"
    return "Every bit saved is a step toward a healthier, wealthier you!"


@dataclass
class SavingsProjection:
    """Current savings plus monthly, yearly and five-year projections."""
    daily_cost: float
    current: float
    monthly: float
    yearly: float
    five_year: float

    @classmethod
    def from_timer(cls, daily_cost: float, display: TimerDisplay) -> "SavingsProjection":
        yearly = daily_cost * DAYS_PER_YEAR
        return cls(
            daily_cost=daily_cost,
            current=display.total_days * daily_cost,
            monthly=daily_cost * DAYS_PER_MONTH,
            yearly=yearly,
            five_year=yearly * 5,
        )

    @property
    def twenty_dollar_bills(self) -> int:
        return math.floor(self.current / BILL_VALUE)

    @property
    def filled_bill_slots(self) -> int:
        """How many of the ten bill icons to light up."""
        return min(BILL_SLOTS, self.twenty_dollar_bills)

    @property
    def message(self) -> str:
        return motivational_message(self.yearly)

    def to_dict(self) -> dict:
        return {
            "dailyCost": self.daily_cost,
            "current": round(self.current, 2),
            "currentFormatted": format_currency(self.current),
            "monthly": round(self.monthly, 2),
            "yearly": round(self.yearly, 2),
            "fiveYear": round(self.five_year, 2),
            "twentyDollarBills": self.twenty_dollar_bills,
            "filledBillSlots": self.filled_bill_slots,
            "message": self.message,
        }
