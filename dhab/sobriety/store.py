"""
Sobriety record storage.

One record per Farcaster ID. Saving is an upsert: the whole record is
replaced with what the client sent.
"""

import logging
import math
from datetime import datetime
from decimal import Decimal
from typing import Optional

from dhab.core.config import Config
from dhab.core.db import session_scope
from dhab.core.models import UserSobriety

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def validate_date(value: str, field_name: str = "date") -> str:
    """Check a YYYY-MM-DD string and return it unchanged."""
    try:
        datetime.strptime(value, DATE_FORMAT)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {field_name}: {value!r} (expected YYYY-MM-DD)")
    if len(value) != 10:
        raise ValueError(f"Invalid {field_name}: {value!r} (expected YYYY-MM-DD)")
    return value


def validate_time(value: str, field_name: str = "time") -> str:
    """Check an HH:MM string and return it unchanged."""
    try:
        datetime.strptime(value, TIME_FORMAT)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {field_name}: {value!r} (expected HH:MM)")
    if len(value) != 5:
        raise ValueError(f"Invalid {field_name}: {value!r} (expected HH:MM)")
    return value


def validate_daily_cost(value) -> Decimal:
    """Daily cost must be a finite, non-negative number."""
    try:
        cost = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid daily cost: {value!r}")
    if math.isnan(cost) or math.isinf(cost) or cost < 0:
        raise ValueError(f"Invalid daily cost: {value!r}")
    return Decimal(str(round(cost, 2)))


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_user_sobriety(config: Config, fid: int) -> Optional[dict]:
    """
    Get a user's sobriety record by FID.

    Returns None if the user has never saved one.
    """
    with session_scope(config) as session:
        record = session.get(UserSobriety, fid)
        if record is None:
            return None
        return record.to_dict()


def save_user_sobriety(
    config: Config,
    fid: int,
    start_date: str,
    addiction: str,
    start_time: Optional[str] = None,
    custom_addiction: Optional[str] = None,
    daily_cost: Optional[float] = None,
    motivation: Optional[str] = None,
    pledge_date: Optional[str] = None,
    wallet_address: Optional[str] = None,
    auth_strategy: Optional[str] = None,
) -> dict:
    """
    Save or replace a user's sobriety record.

    Missing daily cost falls back to the configured default. Empty
    optional strings are stored as NULL.
    """
    if not start_date or not addiction or not addiction.strip():
        raise ValueError("Start date and addiction are required")

    validate_date(start_date, "start date")
    start_time = _blank_to_none(start_time)
    if start_time is not None:
        validate_time(start_time, "start time")
    pledge_date = _blank_to_none(pledge_date)
    if pledge_date is not None:
        validate_date(pledge_date, "pledge date")

    if daily_cost is None:
        cost = Decimal(str(config.default_daily_cost))
    else:
        cost = validate_daily_cost(daily_cost)

    with session_scope(config) as session:
        record = session.get(UserSobriety, fid)
        if record is None:
            record = UserSobriety(fid=fid)
            session.add(record)
            logger.info(f"Creating sobriety record for fid={fid}")
        else:
            logger.info(f"Updating sobriety record for fid={fid}")

        record.start_date = start_date
        record.start_time = start_time
        record.addiction = addiction.strip()
        record.custom_addiction = _blank_to_none(custom_addiction)
        record.daily_cost = cost
        record.motivation = _blank_to_none(motivation)
        record.pledge_date = pledge_date
        record.wallet_address = _blank_to_none(wallet_address)
        record.auth_strategy = _blank_to_none(auth_strategy)
        record.updated_at = datetime.utcnow()

        session.flush()
        return record.to_dict()


def delete_user_sobriety(config: Config, fid: int) -> bool:
    """
    Delete a user's record (timer reset).

    Returns True if a record existed.
    """
    with session_scope(config) as session:
        record = session.get(UserSobriety, fid)
        if record is None:
            return False
        session.delete(record)
        logger.info(f"Deleted sobriety record for fid={fid}")
        return True


def update_pledge(
    config: Config,
    fid: int,
    pledge_date: str,
    motivation: Optional[str] = None,
) -> dict:
    """Record today's pledge and the motivation behind it."""
    validate_date(pledge_date, "pledge date")

    with session_scope(config) as session:
        record = session.get(UserSobriety, fid)
        if record is None:
            raise LookupError(f"No sobriety record for fid={fid}")

        record.pledge_date = pledge_date
        record.motivation = _blank_to_none(motivation)
        record.updated_at = datetime.utcnow()
        session.flush()
        return record.to_dict()


def update_daily_cost(config: Config, fid: int, daily_cost: float) -> dict:
    """Change the daily cost used for savings projections."""
    cost = validate_daily_cost(daily_cost)

    with session_scope(config) as session:
        record = session.get(UserSobriety, fid)
        if record is None:
            raise LookupError(f"No sobriety record for fid={fid}")

        record.daily_cost = cost
        record.updated_at = datetime.utcnow()
        session.flush()
        return record.to_dict()


def link_wallet(
    config: Config,
    fid: int,
    wallet_address: str,
    auth_strategy: str,
) -> dict:
    """Attach the wallet login a user signed in with to their record."""
    with session_scope(config) as session:
        record = session.get(UserSobriety, fid)
        if record is None:
            raise LookupError(f"No sobriety record for fid={fid}")

        record.wallet_address = wallet_address
        record.auth_strategy = auth_strategy
        record.updated_at = datetime.utcnow()
        session.flush()
        logger.info(f"Linked {auth_strategy} wallet to fid={fid}")
        return record.to_dict()
