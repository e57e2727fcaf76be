"""
Tests for the HTTP API.

Uses FastAPI's TestClient against a temporary SQLite database.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dhab.api.app import create_app
from dhab.auth.wallet import AuthError, WalletAccount


@pytest.fixture
def client(config):
    return TestClient(create_app(config))


def _save(client, fid=42, **extra):
    body = {"fid": fid, "startDate": "2024-01-01", "addiction": "Alcohol"}
    body.update(extra)
    return client.post("/api/sobriety", json=body)


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["ok"] is True


class TestSobrietyRoutes:
    """Test /api/sobriety."""

    def test_requires_fid(self, client):
        response = client.get("/api/sobriety")
        assert response.status_code == 400
        assert response.json() == {"error": "FID is required"}

    def test_invalid_fid(self, client):
        response = client.get("/api/sobriety", params={"fid": "abc"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid FID format"}

    def test_no_data(self, client):
        response = client.get("/api/sobriety", params={"fid": 42})
        assert response.json() == {"data": None, "message": "No data found for this user"}

    def test_save_and_fetch(self, client):
        response = _save(client, startTime="08:15", dailyCost=12.5, motivation="health")
        assert response.json() == {"success": True, "message": "Data saved successfully"}

        data = client.get("/api/sobriety", params={"fid": "42"}).json()["data"]
        assert data["startTime"] == "08:15"
        assert data["dailyCost"] == 12.5
        assert data["motivation"] == "health"

    def test_save_missing_fields(self, client):
        response = client.post("/api/sobriety", json={"fid": 42, "addiction": "Alcohol"})
        assert response.status_code == 400
        assert response.json() == {"error": "Start date and addiction are required"}

    def test_save_bad_date(self, client):
        response = _save(client, startDate="yesterday")
        assert response.status_code == 400

    def test_delete(self, client):
        _save(client)
        response = client.delete("/api/sobriety", params={"fid": 42})
        assert response.json() == {"success": True, "message": "Data deleted successfully"}
        assert client.get("/api/sobriety", params={"fid": 42}).json()["data"] is None

    def test_pledge_and_cost(self, client):
        _save(client)

        pledge = client.put(
            "/api/sobriety/pledge",
            json={"fid": 42, "pledgeDate": "2024-01-02", "motivation": "kids"},
        )
        assert pledge.json()["data"]["pledgeDate"] == "2024-01-02"

        cost = client.put("/api/sobriety/daily-cost", json={"fid": 42, "dailyCost": 3})
        assert cost.json()["data"]["dailyCost"] == 3.0

        negative = client.put("/api/sobriety/daily-cost", json={"fid": 42, "dailyCost": -3})
        assert negative.status_code == 400

    def test_updates_unknown_user(self, client):
        response = client.put("/api/sobriety/daily-cost", json={"fid": 7, "dailyCost": 3})
        assert response.status_code == 404

    def test_summary(self, client):
        _save(client, dailyCost=10)
        summary = client.get("/api/sobriety/summary", params={"fid": 42}).json()["summary"]

        assert summary["addiction"] == "Alcohol"
        assert summary["timer"]["days"] > 0
        assert summary["savings"]["yearly"] == 3650.0

        assert client.get("/api/sobriety/summary", params={"fid": 7}).status_code == 404


class TestCommunityRoutes:
    """Test /api/community."""

    def _create(self, client, post_id="p1", **extra):
        body = {
            "action": "create_post",
            "id": post_id,
            "anonymousId": "BraveLion1",
            "addiction": "Alcohol",
            "content": "One day at a time.",
            "timestamp": 1_700_000_000_000,
        }
        body.update(extra)
        return client.post("/api/community", json=body)

    def test_requires_addiction(self, client):
        response = client.get("/api/community")
        assert response.status_code == 400
        assert response.json() == {"error": "Addiction parameter is required"}

    def test_invalid_action(self, client):
        response = client.post("/api/community", json={"action": "delete_everything"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid action"}

    def test_missing_fields(self, client):
        response = client.post("/api/community", json={"action": "create_post", "id": "p1"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_create_and_list(self, client):
        assert self._create(client).json() == {"success": True}

        posts = client.get("/api/community", params={"addiction": "Alcohol"}).json()["posts"]
        assert [p["id"] for p in posts] == ["p1"]
        assert posts[0]["comments"] == []

    def test_duplicate_post(self, client):
        self._create(client)
        assert self._create(client).status_code == 409

    def test_comment_and_react(self, client):
        self._create(client)

        comment = client.post("/api/community", json={
            "action": "add_comment",
            "id": "c1",
            "postId": "p1",
            "anonymousId": "KindStar2",
            "content": "Proud of you",
            "timestamp": 1_700_000_001_000,
        })
        assert comment.json() == {"success": True}

        react = {"action": "toggle_reaction", "postId": "p1", "anonymousId": "KindStar2", "emoji": "💪"}
        assert client.post("/api/community", json=react).json() == {"success": True, "added": True}

        comments = client.get(
            "/api/community",
            params={"addiction": "Alcohol", "postId": "p1", "action": "comments"},
        ).json()["comments"]
        assert [c["id"] for c in comments] == ["c1"]

        reactions = client.get(
            "/api/community",
            params={"addiction": "Alcohol", "postId": "p1", "action": "reactions"},
        ).json()["reactions"]
        assert reactions == [{"emoji": "💪", "count": 1, "users": ["KindStar2"]}]

        assert client.post("/api/community", json=react).json()["added"] is False

    def test_comment_unknown_post(self, client):
        response = client.post("/api/community", json={
            "action": "add_comment",
            "id": "c1",
            "postId": "missing",
            "anonymousId": "KindStar2",
            "content": "Hello",
            "timestamp": 1,
        })
        assert response.status_code == 404

    def test_flag_until_hidden(self, client):
        self._create(client)

        for user in ("A", "B", "C"):
            response = client.post("/api/community", json={
                "action": "flag", "targetType": "post", "targetId": "p1", "anonymousId": user,
            })
            assert response.json()["alreadyFlagged"] is False

        repeat = client.post("/api/community", json={
            "action": "flag", "targetType": "post", "targetId": "p1", "anonymousId": "A",
        })
        assert repeat.json()["alreadyFlagged"] is True

        assert client.get("/api/community", params={"addiction": "Alcohol"}).json()["posts"] == []
        everything = client.get(
            "/api/community", params={"addiction": "Alcohol", "includeHidden": "true"}
        ).json()["posts"]
        assert everything[0]["flagCount"] == 3

    def test_viewer_feed(self, client):
        self._create(client)
        client.post("/api/community", json={
            "action": "flag", "targetType": "post", "targetId": "p1", "anonymousId": "Me",
        })

        body = client.get(
            "/api/community", params={"addiction": "Alcohol", "anonymousId": "Me"}
        ).json()
        assert body["sample"] is False
        assert body["posts"][0]["flaggedByUser"] is True
        assert len(body["posts"][0]["reactions"]) == 4

    def test_viewer_feed_samples(self, client):
        body = client.get(
            "/api/community", params={"addiction": "Gambling", "anonymousId": "Me"}
        ).json()
        assert body["sample"] is True
        assert len(body["posts"]) == 3


class TestAddictionRoutes:

    def test_full_catalog(self, client):
        body = client.get("/api/addictions").json()
        assert len(body["categories"]) == 13
        assert body["matches"] == []

    def test_search(self, client):
        body = client.get("/api/addictions", params={"q": "xanax"}).json()
        assert body["matches"] == ["Xanax"]
        assert body["categories"] == [{"name": "Benzodiazepines", "items": ["Xanax"]}]


class TestAuthRoutes:
    """Test /api/auth with the wallet provider mocked."""

    def test_farcaster_links_record(self, client):
        _save(client)
        response = client.post("/api/auth/farcaster", json={"fid": 42, "username": "alice"})

        body = response.json()
        assert body["account"]["address"] == "farcaster:42"
        assert body["linked"] is True
        data = client.get("/api/sobriety", params={"fid": 42}).json()["data"]
        assert data["authStrategy"] == "farcaster:alice"

    def test_farcaster_without_record(self, client):
        body = client.post("/api/auth/farcaster", json={"fid": 5}).json()
        assert body["linked"] is False

    @patch("dhab.api.auth.ThirdwebAuth")
    def test_email_flow(self, mock_auth, client):
        _save(client)
        mock_auth.return_value.verify_email_code.return_value = WalletAccount(
            address="0xabc", strategy="email"
        )

        start = client.post("/api/auth/email/initiate", json={"email": "me@example.com"})
        assert start.json() == {"success": True, "needsVerification": True}

        done = client.post(
            "/api/auth/email/verify",
            json={"email": "me@example.com", "code": "123456", "fid": 42},
        )
        assert done.json()["linked"] is True
        assert done.json()["account"]["address"] == "0xabc"

    @patch("dhab.api.auth.ThirdwebAuth")
    def test_email_provider_down(self, mock_auth, client):
        mock_auth.return_value.initiate_email_login.side_effect = AuthError("timeout")
        response = client.post("/api/auth/email/initiate", json={"email": "me@example.com"})
        assert response.status_code == 502

    @patch("dhab.api.auth.ThirdwebAuth")
    def test_bad_code(self, mock_auth, client):
        mock_auth.return_value.verify_email_code.side_effect = AuthError("Invalid verification code")
        response = client.post(
            "/api/auth/email/verify", json={"email": "me@example.com", "code": "000000"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid verification code"}


class TestCommunityValidation:
    """Test body validation and the sample feed decision."""

    def test_non_string_content(self, client):
        response = client.post("/api/community", json={
            "action": "create_post",
            "id": "p1",
            "anonymousId": "BraveLion1",
            "addiction": "Alcohol",
            "content": 123,
            "timestamp": 1_700_000_000_000,
        })
        assert response.status_code == 400
        assert "error" in response.json()

    def test_non_numeric_timestamp(self, client):
        response = client.post("/api/community", json={
            "action": "add_comment",
            "id": "c1",
            "postId": "p1",
            "anonymousId": "KindStar2",
            "content": "Hi",
            "timestamp": "yesterday",
        })
        assert response.status_code == 400

    def test_all_posts_hidden_shows_no_samples(self, client):
        client.post("/api/community", json={
            "action": "create_post",
            "id": "p1",
            "anonymousId": "BraveLion1",
            "addiction": "Alcohol",
            "content": "Buy my stuff",
            "timestamp": 1_700_000_000_000,
        })
        for user in ("X", "Y", "Z"):
            client.post("/api/community", json={
                "action": "flag", "targetType": "post", "targetId": "p1", "anonymousId": user,
            })

        body = client.get(
            "/api/community", params={"addiction": "Alcohol", "anonymousId": "V"}
        ).json()
        assert body["sample"] is False
        assert body["posts"] == []
