"""
Sobriety record endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dhab.api.deps import get_config, parse_fid
from dhab.api.schemas import DailyCostIn, PledgeIn, SobrietyIn
from dhab.core.config import Config
from dhab.sobriety import store
from dhab.sobriety.summary import build_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sobriety", tags=["sobriety"])


@router.get("")
def get_sobriety(
    fid: Optional[str] = Query(None),
    config: Config = Depends(get_config),
):
    """Fetch a user's sobriety data by FID."""
    fid_number = parse_fid(fid)
    data = store.get_user_sobriety(config, fid_number)

    if data is None:
        return {"data": None, "message": "No data found for this user"}
    return {"data": data}


@router.post("")
def save_sobriety(payload: SobrietyIn, config: Config = Depends(get_config)):
    """Save or update a user's sobriety data."""
    fid = parse_fid(payload.fid)

    if not payload.start_date or not payload.addiction:
        raise HTTPException(status_code=400, detail="Start date and addiction are required")

    try:
        store.save_user_sobriety(
            config,
            fid=fid,
            start_date=payload.start_date,
            addiction=payload.addiction,
            start_time=payload.start_time,
            custom_addiction=payload.custom_addiction,
            daily_cost=payload.daily_cost,
            motivation=payload.motivation,
            pledge_date=payload.pledge_date,
            wallet_address=payload.wallet_address,
            auth_strategy=payload.auth_strategy,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "message": "Data saved successfully"}


@router.delete("")
def delete_sobriety(
    fid: Optional[str] = Query(None),
    config: Config = Depends(get_config),
):
    """Reset a user's sobriety data."""
    fid_number = parse_fid(fid)
    store.delete_user_sobriety(config, fid_number)
    return {"success": True, "message": "Data deleted successfully"}


@router.put("/pledge")
def update_pledge(payload: PledgeIn, config: Config = Depends(get_config)):
    """Record today's pledge."""
    fid = parse_fid(payload.fid)
    if not payload.pledge_date:
        raise HTTPException(status_code=400, detail="Pledge date is required")

    try:
        data = store.update_pledge(config, fid, payload.pledge_date, payload.motivation)
    except LookupError:
        raise HTTPException(status_code=404, detail="No data found for this user")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "data": data}


@router.put("/daily-cost")
def update_daily_cost(payload: DailyCostIn, config: Config = Depends(get_config)):
    """Change the daily cost used for savings."""
    fid = parse_fid(payload.fid)
    if payload.daily_cost is None:
        raise HTTPException(status_code=400, detail="Daily cost is required")

    try:
        data = store.update_daily_cost(config, fid, payload.daily_cost)
    except LookupError:
        raise HTTPException(status_code=404, detail="No data found for this user")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "data": data}


@router.get("/summary")
def get_summary(
    fid: Optional[str] = Query(None),
    config: Config = Depends(get_config),
):
    """Timer, milestone and savings for a user."""
    fid_number = parse_fid(fid)
    data = store.get_user_sobriety(config, fid_number)
    if data is None:
        raise HTTPException(status_code=404, detail="No data found for this user")

    return {"summary": build_summary(config, data)}
