"""
Unit tests for wallet login.

The thirdweb HTTP API is mocked; no network calls are made.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dhab.auth import (
    AuthError,
    AuthSession,
    AuthStrategy,
    ThirdwebAuth,
    WalletAccount,
    farcaster_account,
)
from dhab.core.config import Config


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def auth():
    return ThirdwebAuth(Config(thirdweb_client_id="client-123"))


class TestFarcasterAccount:
    """Test Farcaster pseudo-accounts."""

    def test_address_from_fid(self):
        account = farcaster_account(42)
        assert account.address == "farcaster:42"
        assert account.strategy == "farcaster"

    def test_username_kept_in_strategy(self):
        account = farcaster_account(42, "alice")
        assert account.strategy == "farcaster:alice"
        assert account.base_strategy == AuthStrategy.FARCASTER

    def test_invalid_fid(self):
        with pytest.raises(ValueError):
            farcaster_account(0)


class TestEmailLogin:
    """Test the two-step email login."""

    @patch("dhab.auth.wallet.requests.post")
    def test_initiate(self, mock_post, auth):
        mock_post.return_value = _response({"success": True})

        assert auth.initiate_email_login("me@example.com") is True

        url = mock_post.call_args.args[0]
        kwargs = mock_post.call_args.kwargs
        assert url == "https://api.thirdweb.com/v1/auth/initiate"
        assert kwargs["json"] == {"type": "email", "email": "me@example.com"}
        assert kwargs["headers"]["x-client-id"] == "client-123"

    def test_invalid_email(self, auth):
        with pytest.raises(ValueError):
            auth.initiate_email_login("not-an-email")

    @patch("dhab.auth.wallet.requests.post")
    def test_verify(self, mock_post, auth):
        mock_post.return_value = _response({"walletAddress": "0xabc", "token": "t"})

        account = auth.verify_email_code("me@example.com", " 123456 ")

        assert account.address == "0xabc"
        assert account.strategy == "email"
        assert mock_post.call_args.kwargs["json"]["code"] == "123456"

    @patch("dhab.auth.wallet.requests.post")
    def test_verify_without_wallet(self, mock_post, auth):
        mock_post.return_value = _response({})
        with pytest.raises(AuthError, match="Invalid verification code"):
            auth.verify_email_code("me@example.com", "000000")

    @patch("dhab.auth.wallet.requests.post")
    def test_http_error(self, mock_post, auth):
        response = _response({})
        response.raise_for_status.side_effect = requests.HTTPError("400 Bad Request")
        mock_post.return_value = response

        with pytest.raises(AuthError):
            auth.initiate_email_login("me@example.com")

    @patch("dhab.auth.wallet.requests.post")
    def test_missing_client_id(self, mock_post):
        with pytest.raises(AuthError, match="THIRDWEB_CLIENT_ID"):
            ThirdwebAuth(Config()).initiate_email_login("me@example.com")
        mock_post.assert_not_called()


class TestAuthSession:
    """Test login state transitions."""

    def test_connect_and_disconnect(self):
        session = AuthSession()
        session.begin(AuthStrategy.EMAIL)
        assert session.is_connecting is True

        session.connected(WalletAccount(address="0xabc", strategy="email"))
        assert session.is_connected is True
        assert session.is_connecting is False
        assert session.to_dict()["strategy"] == "email"

        session.disconnect()
        assert session.to_dict()["account"] is None

    def test_failure_keeps_error(self):
        session = AuthSession()
        session.begin(AuthStrategy.GOOGLE)
        session.failed("Popup closed")

        assert session.is_connecting is False
        assert session.error == "Popup closed"
        session.clear_error()
        assert session.error is None
