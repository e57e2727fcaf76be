"""
Wallet login for Dhab.

Handles thirdweb email login, Farcaster pseudo-accounts and login state.
"""

from dhab.auth.wallet import (
    AuthError,
    AuthSession,
    AuthStrategy,
    ThirdwebAuth,
    WalletAccount,
    farcaster_account,
)

__all__ = [
    "AuthError",
    "AuthSession",
    "AuthStrategy",
    "ThirdwebAuth",
    "WalletAccount",
    "farcaster_account",
]
