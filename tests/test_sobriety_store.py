"""
Tests for sobriety record storage.

Runs against a temporary SQLite database per test.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dhab.sobriety import store
from dhab.sobriety.summary import build_summary


class TestSave:
    """Test saving records."""

    def test_save_and_get(self, config):
        store.save_user_sobriety(config, 42, "2024-01-01", "Alcohol", start_time="09:30")

        record = store.get_user_sobriety(config, 42)
        assert record["fid"] == 42
        assert record["startDate"] == "2024-01-01"
        assert record["startTime"] == "09:30"
        assert record["addiction"] == "Alcohol"

    def test_missing_cost_uses_default(self, config):
        record = store.save_user_sobriety(config, 1, "2024-01-01", "Nicotine")
        assert record["dailyCost"] == 8.0

    def test_zero_cost_kept(self, config):
        record = store.save_user_sobriety(config, 1, "2024-01-01", "Nicotine", daily_cost=0)
        assert record["dailyCost"] == 0.0

    def test_upsert_replaces(self, config):
        store.save_user_sobriety(config, 7, "2024-01-01", "Alcohol", motivation="health")
        store.save_user_sobriety(config, 7, "2024-02-01", "Sugar", daily_cost=3.5)

        record = store.get_user_sobriety(config, 7)
        assert record["startDate"] == "2024-02-01"
        assert record["addiction"] == "Sugar"
        assert record["dailyCost"] == 3.5
        assert record["motivation"] is None

    def test_blank_strings_stored_as_null(self, config):
        record = store.save_user_sobriety(
            config, 3, "2024-01-01", "Caffeine", start_time="", custom_addiction="  "
        )
        assert record["startTime"] is None
        assert record["customAddiction"] is None

    def test_required_fields(self, config):
        with pytest.raises(ValueError, match="Start date and addiction are required"):
            store.save_user_sobriety(config, 1, "", "Alcohol")
        with pytest.raises(ValueError, match="Start date and addiction are required"):
            store.save_user_sobriety(config, 1, "2024-01-01", "  ")

    @pytest.mark.parametrize("kwargs", [
        {"start_date": "01/02/2024"},
        {"start_date": "2024-1-2"},
        {"start_time": "9:30"},
        {"start_time": "25:00"},
        {"daily_cost": -1},
        {"daily_cost": float("nan")},
    ])
    def test_rejects_bad_values(self, config, kwargs):
        args = {"start_date": "2024-01-01", "addiction": "Alcohol"}
        args.update(kwargs)
        with pytest.raises(ValueError):
            store.save_user_sobriety(config, 1, **args)

    def test_cost_rounded_to_cents(self, config):
        record = store.save_user_sobriety(config, 1, "2024-01-01", "Alcohol", daily_cost=4.999)
        assert record["dailyCost"] == 5.0


class TestGetAndDelete:
    """Test lookups and resets."""

    def test_unknown_fid(self, config):
        assert store.get_user_sobriety(config, 999) is None

    def test_delete(self, config):
        store.save_user_sobriety(config, 5, "2024-01-01", "Alcohol")
        assert store.delete_user_sobriety(config, 5) is True
        assert store.get_user_sobriety(config, 5) is None
        assert store.delete_user_sobriety(config, 5) is False


class TestUpdates:
    """Test partial updates."""

    def test_update_pledge(self, config):
        store.save_user_sobriety(config, 9, "2024-01-01", "Alcohol")
        record = store.update_pledge(config, 9, "2024-03-01", "Better mental clarity")
        assert record["pledgeDate"] == "2024-03-01"
        assert record["motivation"] == "Better mental clarity"
        assert record["addiction"] == "Alcohol"

    def test_update_pledge_unknown(self, config):
        with pytest.raises(LookupError):
            store.update_pledge(config, 404, "2024-03-01")

    def test_update_daily_cost(self, config):
        store.save_user_sobriety(config, 9, "2024-01-01", "Alcohol")
        assert store.update_daily_cost(config, 9, 12)["dailyCost"] == 12.0

        with pytest.raises(ValueError):
            store.update_daily_cost(config, 9, -5)
        with pytest.raises(LookupError):
            store.update_daily_cost(config, 404, 5)

    def test_link_wallet(self, config):
        store.save_user_sobriety(config, 9, "2024-01-01", "Alcohol")
        record = store.link_wallet(config, 9, "0xabc", "email")
        assert record["walletAddress"] == "0xabc"
        assert record["authStrategy"] == "email"

        with pytest.raises(LookupError):
            store.link_wallet(config, 404, "0xabc", "email")


class TestSummary:
    """Test the timer summary built from a stored record."""

    def test_summary(self, config):
        record = store.save_user_sobriety(
            config, 11, "2024-01-01", "Alcohol", start_time="00:00", daily_cost=10
        )
        now = datetime(2024, 1, 8, 6, 0, tzinfo=timezone.utc)
        summary = build_summary(config, record, now=now)

        assert summary["timer"]["days"] == 7
        assert summary["timer"]["hours"] == 6
        assert summary["milestone"] == "1 Week"
        assert summary["savings"]["current"] == 72.5
        assert summary["savings"]["twentyDollarBills"] == 3
