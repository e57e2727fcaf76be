"""
Wallet login through thirdweb in-app wallets.

Email login is a two-step code exchange against the thirdweb HTTP API.
Farcaster mini-app users are already identified by their FID, so they
get a pseudo-address instead of a round trip.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import requests

from dhab.core.config import Config

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class AuthStrategy(str, Enum):
    """Login methods offered by the in-app wallet."""
    FARCASTER = "farcaster"
    GOOGLE = "google"
    EMAIL = "email"


class AuthError(Exception):
    """Wallet provider rejected or failed a login step."""


@dataclass
class WalletAccount:
    """A connected wallet."""
    address: str
    strategy: str
    token: Optional[str] = None
    connected_at: float = field(default_factory=time.time)

    @property
    def base_strategy(self) -> AuthStrategy:
        """Strategy without the Farcaster username suffix."""
        return AuthStrategy(self.strategy.split(":", 1)[0])

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "strategy": self.strategy,
            "timestamp": int(self.connected_at * 1000),
        }


def farcaster_account(fid: int, username: Optional[str] = None) -> WalletAccount:
    """
    Account for a Farcaster mini-app user.

    The FID doubles as the address: farcaster:<fid>, with the username
    kept in the strategy when known.
    """
    if fid is None or int(fid) <= 0:
        raise ValueError(f"Invalid FID: {fid!r}")

    strategy = AuthStrategy.FARCASTER.value
    if username:
        strategy = f"{strategy}:{username}"

    return WalletAccount(address=f"farcaster:{int(fid)}", strategy=strategy)


class ThirdwebAuth:
    """
    Client for the thirdweb auth endpoints.

    Requires THIRDWEB_CLIENT_ID.
    """

    def __init__(self, config: Config):
        self.config = config
        self.api_url = config.thirdweb_api_url
        self.client_id = config.thirdweb_client_id

    def _post(self, path: str, payload: dict) -> dict:
        if not self.client_id:
            raise AuthError("THIRDWEB_CLIENT_ID is not configured")

        try:
            response = requests.post(
                f"{self.api_url}{path}",
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "x-client-id": self.client_id,
                },
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"thirdweb {path} failed: {e}")
            raise AuthError(str(e)) from e

        try:
            return response.json()
        except ValueError:
            return {}

    def initiate_email_login(self, email: str) -> bool:
        """
        Send a verification code to an email address.

        Returns True once the code has been sent; the caller must follow
        up with verify_email_code.
        """
        if not email or "@" not in email:
            raise ValueError(f"Invalid email: {email!r}")

        self._post("/v1/auth/initiate", {"type": "email", "email": email})
        logger.info("Verification code sent")
        return True

    def verify_email_code(self, email: str, code: str) -> WalletAccount:
        """Exchange an emailed code for a connected wallet."""
        if not code or not code.strip():
            raise ValueError("Verification code is required")

        data = self._post(
            "/v1/auth/complete",
            {"type": "email", "email": email, "code": code.strip()},
        )

        address = data.get("walletAddress")
        if not address:
            raise AuthError("Invalid verification code")

        logger.info(f"Connected with Email: {address}")
        return WalletAccount(
            address=address,
            strategy=AuthStrategy.EMAIL.value,
            token=data.get("token"),
        )


class AuthSession:
    """
    Login state for one user.

    Mirrors what the login screen shows: connecting, connected or an error.
    """

    def __init__(self):
        self.account: Optional[WalletAccount] = None
        self.strategy: Optional[AuthStrategy] = None
        self.is_connecting = False
        self.error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.account is not None

    def begin(self, strategy: AuthStrategy) -> None:
        """Start a login attempt."""
        self.is_connecting = True
        self.error = None
        self.strategy = strategy

    def connected(self, account: WalletAccount) -> None:
        """Finish a login attempt successfully."""
        self.account = account
        self.strategy = account.base_strategy
        self.is_connecting = False
        self.error = None

    def failed(self, message: str) -> None:
        """Finish a login attempt with an error; any account is kept."""
        self.is_connecting = False
        self.error = message

    def disconnect(self) -> None:
        self.account = None
        self.strategy = None
        self.is_connecting = False
        self.error = None

    def clear_error(self) -> None:
        self.error = None

    def to_dict(self) -> dict:
        return {
            "account": self.account.to_dict() if self.account else None,
            "strategy": self.strategy.value if self.strategy else None,
            "isConnecting": self.is_connecting,
            "isConnected": self.is_connected,
            "error": self.error,
        }
