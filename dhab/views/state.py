"""
View state for the sobriety timer.

The app moves between four screens: pledge, setup, timer and community.
Which one is shown depends on what the user has saved and on form input.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from dhab.core.addictions import AddictionCategory, filter_categories
from dhab.core.utils import today_iso

logger = logging.getLogger(__name__)

DEFAULT_DAILY_COST = 8.0


class ViewType(str, Enum):
    PLEDGE = "pledge"
    SETUP = "setup"
    TIMER = "timer"
    COMMUNITY = "community"


class TimerTab(str, Enum):
    SUMMARY = "summary"
    SAVINGS = "savings"


# (id, text) pairs offered on the pledge screen
PLEDGE_MOTIVATIONS = [
    ("kids", "For my kids to have a present father."),
    ("family", "I want my family to respect me."),
    ("hangovers", "No more hangovers! 💪"),
    ("partner", "To rebuild trust with my partner."),
    ("health", "Physical health & fitness"),
    ("better", "I feel so much better"),
    ("money", "Save money for things I love"),
    ("mental", "Better mental clarity"),
]

# (id, badge) pairs a community post can carry
POST_MILESTONES = [
    ("reached", "🎉 Milestone Reached!"),
    ("strong", "💪 Staying Strong"),
    ("support", "🆘 Need Support"),
]

_DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def post_milestone_text(milestone_id: str) -> str:
    """Badge text for a milestone id."""
    badges = dict(POST_MILESTONES)
    if milestone_id not in badges:
        raise ValueError(f"Unknown milestone: {milestone_id!r}")
    return badges[milestone_id]


def pledge_day_name(day: Optional[date] = None) -> str:
    """Weekday name for the pledge heading."""
    day = day or date.today()
    return _DAY_NAMES[day.weekday()]


@dataclass
class PledgeForm:
    """Daily pledge: accept it and pick at least one reason."""
    accepted: bool = False
    selected: List[str] = field(default_factory=list)

    def toggle_accepted(self) -> None:
        self.accepted = not self.accepted

    def toggle_motivation(self, motivation_id: str) -> None:
        known = {mid for mid, _ in PLEDGE_MOTIVATIONS}
        if motivation_id not in known:
            raise ValueError(f"Unknown motivation: {motivation_id!r}")

        if motivation_id in self.selected:
            self.selected.remove(motivation_id)
        else:
            self.selected.append(motivation_id)

    @property
    def can_confirm(self) -> bool:
        return self.accepted and len(self.selected) > 0

    def motivation_text(self) -> str:
        """Selected reasons joined in the order they were picked."""
        texts = dict(PLEDGE_MOTIVATIONS)
        return ", ".join(texts[mid] for mid in self.selected if mid in texts)


@dataclass
class SoberTimerData:
    """What the user has entered, in the shape the API stores."""
    start_date: str = ""
    start_time: str = ""
    addiction: str = ""
    custom_addiction: str = ""
    daily_cost: float = DEFAULT_DAILY_COST
    motivation: str = ""
    pledge_date: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.start_date and self.addiction)

    @classmethod
    def from_record(cls, record: dict) -> "SoberTimerData":
        """Build from an API/store record (camelCase keys)."""
        return cls(
            start_date=record.get("startDate") or "",
            start_time=record.get("startTime") or "",
            addiction=record.get("addiction") or "",
            custom_addiction=record.get("customAddiction") or "",
            daily_cost=float(record.get("dailyCost") or DEFAULT_DAILY_COST),
            motivation=record.get("motivation") or "",
            pledge_date=record.get("pledgeDate") or "",
        )

    def to_record(self) -> dict:
        return {
            "startDate": self.start_date,
            "startTime": self.start_time,
            "addiction": self.addiction,
            "customAddiction": self.custom_addiction,
            "dailyCost": self.daily_cost,
            "motivation": self.motivation,
            "pledgeDate": self.pledge_date,
        }


class SoberTimerController:
    """
    Screen transitions and form handling.

    Holds no storage of its own; callers persist `data` after each
    transition that changes it.
    """

    def __init__(self, data: Optional[SoberTimerData] = None):
        self.data = data or SoberTimerData()
        self.view = ViewType.PLEDGE
        self.active_tab = TimerTab.SUMMARY
        self.search_query = ""
        self.expanded_category: Optional[str] = None
        self.show_custom_input = False
        self.is_editing_cost = False
        self.temp_cost = ""

    def load(self, data: Optional[SoberTimerData], today: Optional[str] = None) -> ViewType:
        """
        Restore saved data and pick the opening screen.

        Saved timer -> timer. Already pledged today -> setup.
        Otherwise the pledge screen.
        """
        today = today or today_iso()
        if data is None:
            self.view = ViewType.PLEDGE
            return self.view

        if not data.daily_cost:
            data.daily_cost = DEFAULT_DAILY_COST
        self.data = data

        if data.is_complete:
            self.view = ViewType.TIMER
        elif data.pledge_date == today:
            self.view = ViewType.SETUP
        else:
            self.view = ViewType.PLEDGE
        return self.view

    # Pledge

    def confirm_pledge(self, motivation: str, today: Optional[str] = None) -> ViewType:
        self.data.motivation = motivation
        self.data.pledge_date = today or today_iso()
        self.view = ViewType.SETUP
        return self.view

    def close_pledge(self) -> ViewType:
        """Skip the pledge, allowed only when a timer already exists."""
        if self.data.is_complete:
            self.view = ViewType.TIMER
        return self.view

    # Setup

    def set_search(self, query: str) -> List[AddictionCategory]:
        self.search_query = query
        return self.visible_categories()

    def visible_categories(self) -> List[AddictionCategory]:
        return filter_categories(self.search_query)

    def toggle_category(self, name: str) -> None:
        self.expanded_category = None if self.expanded_category == name else name

    def select_addiction(self, addiction: str) -> None:
        self.data.addiction = addiction
        self.show_custom_input = False

    def toggle_custom_input(self) -> None:
        self.show_custom_input = not self.show_custom_input
        if self.show_custom_input:
            self.data.addiction = ""

    def start_timer(self) -> ViewType:
        """
        Validate the setup form and switch to the timer.

        Raises:
            ValueError: start date or addiction missing
        """
        if not self.data.start_date:
            raise ValueError("Please select a start date")

        addiction = self.data.custom_addiction if self.show_custom_input else self.data.addiction
        addiction = (addiction or "").strip()
        if not addiction:
            raise ValueError("Please select or enter an addiction")

        self.data.addiction = addiction
        self.view = ViewType.TIMER
        logger.info(f"Timer started for {addiction} from {self.data.start_date}")
        return self.view

    # Timer

    def set_tab(self, tab: TimerTab) -> None:
        self.active_tab = TimerTab(tab)

    def edit_cost(self) -> None:
        self.is_editing_cost = True
        self.temp_cost = f"{self.data.daily_cost:g}"

    def update_cost(self, text: Optional[str] = None) -> bool:
        """
        Apply the edited daily cost.

        Anything that is not a non-negative number is ignored.
        Returns True if the cost changed.
        """
        raw = self.temp_cost if text is None else text
        self.is_editing_cost = False

        try:
            cost = float(raw)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(cost) or cost < 0:
            return False

        self.data.daily_cost = cost
        return True

    def reset(self) -> ViewType:
        """Forget the timer and go back to setup."""
        self.data = SoberTimerData()
        self.view = ViewType.SETUP
        self.show_custom_input = False
        self.expanded_category = None
        self.search_query = ""
        self.active_tab = TimerTab.SUMMARY
        return self.view

    # Community

    def open_community(self) -> ViewType:
        self.view = ViewType.COMMUNITY
        return self.view

    def back(self) -> ViewType:
        self.view = ViewType.TIMER
        return self.view

    def snapshot(self) -> dict:
        """Current screen and form values."""
        return {
            "view": self.view.value,
            "activeTab": self.active_tab.value,
            "data": asdict(self.data),
        }
