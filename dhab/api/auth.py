"""
Wallet login endpoints.

A login that carries a FID is linked to that user's sobriety record
when one exists.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from dhab.api.deps import get_config, parse_fid
from dhab.api.schemas import EmailLoginIn, EmailVerifyIn, FarcasterLoginIn
from dhab.auth.wallet import AuthError, ThirdwebAuth, WalletAccount, farcaster_account
from dhab.core.config import Config
from dhab.sobriety import store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _link_if_known(config: Config, fid: Optional[int], account: WalletAccount) -> bool:
    if fid is None:
        return False
    try:
        store.link_wallet(config, fid, account.address, account.strategy)
    except LookupError:
        logger.info(f"No sobriety record yet for fid={fid}; wallet not linked")
        return False
    return True


@router.post("/email/initiate")
def initiate_email(payload: EmailLoginIn, config: Config = Depends(get_config)):
    """Send a login code to an email address."""
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")

    try:
        ThirdwebAuth(config).initiate_email_login(payload.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthError:
        raise HTTPException(status_code=502, detail="Failed to send verification code")

    return {"success": True, "needsVerification": True}


@router.post("/email/verify")
def verify_email(payload: EmailVerifyIn, config: Config = Depends(get_config)):
    """Complete an email login with the emailed code."""
    if not payload.email or not payload.code:
        raise HTTPException(status_code=400, detail="Email and code are required")

    fid = parse_fid(payload.fid) if payload.fid is not None else None

    try:
        account = ThirdwebAuth(config).verify_email_code(payload.email, payload.code)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AuthError:
        raise HTTPException(status_code=401, detail="Invalid verification code")

    linked = _link_if_known(config, fid, account)
    return {"success": True, "account": account.to_dict(), "linked": linked}


@router.post("/farcaster")
def login_farcaster(payload: FarcasterLoginIn, config: Config = Depends(get_config)):
    """Sign in a Farcaster mini-app user by FID."""
    fid = parse_fid(payload.fid)
    account = farcaster_account(fid, payload.username)
    linked = _link_if_known(config, fid, account)
    logger.info(f"Connected with Farcaster: {account.address}")
    return {"success": True, "account": account.to_dict(), "linked": linked}
