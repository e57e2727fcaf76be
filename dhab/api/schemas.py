"""
Request bodies for the HTTP API.

Fields are camelCase on the wire. Everything is optional so the routes
can answer missing fields with their own messages instead of a 422.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SobrietyIn(CamelModel):
    fid: Optional[Union[int, str]] = None
    start_date: Optional[str] = None
    start_time: Optional[str] = None
    addiction: Optional[str] = None
    custom_addiction: Optional[str] = None
    daily_cost: Optional[float] = None
    motivation: Optional[str] = None
    pledge_date: Optional[str] = None
    wallet_address: Optional[str] = None
    auth_strategy: Optional[str] = None


class PledgeIn(CamelModel):
    fid: Optional[Union[int, str]] = None
    pledge_date: Optional[str] = None
    motivation: Optional[str] = None


class DailyCostIn(CamelModel):
    fid: Optional[Union[int, str]] = None
    daily_cost: Optional[float] = None


class EmailLoginIn(CamelModel):
    email: Optional[str] = None


class EmailVerifyIn(CamelModel):
    email: Optional[str] = None
    code: Optional[str] = None
    fid: Optional[Union[int, str]] = None


class FarcasterLoginIn(CamelModel):
    fid: Optional[Union[int, str]] = None
    username: Optional[str] = None


class CommunityActionIn(CamelModel):
    """One body shape for every community action; the route checks which fields each needs."""
    action: Optional[str] = None
    id: Optional[str] = None
    post_id: Optional[str] = None
    anonymous_id: Optional[str] = None
    addiction: Optional[str] = None
    content: Optional[str] = None
    timestamp: Optional[int] = None
    milestone: Optional[str] = None
    emoji: Optional[str] = None
    target_type: Optional[str] = None
    target_id: Optional[str] = None
