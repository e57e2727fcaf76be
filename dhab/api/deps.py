"""
Shared request helpers for the API routers.
"""

from typing import Optional, Union

from fastapi import HTTPException, Request

from dhab.core.config import Config


def get_config(request: Request) -> Config:
    return request.app.state.config


def parse_fid(raw: Optional[Union[int, str]]) -> int:
    """
    Validate a FID from a query string or body.

    Raises:
        HTTPException: 400 when missing or not a positive integer
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise HTTPException(status_code=400, detail="FID is required")

    if isinstance(raw, bool):
        raise HTTPException(status_code=400, detail="Invalid FID format")

    try:
        fid = int(str(raw).strip())
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid FID format")

    if fid <= 0:
        raise HTTPException(status_code=400, detail="Invalid FID format")
    return fid
