"""
Unit tests for configuration loading.
"""

import sys
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dhab.core.config import Config


class TestFromEnv:
    """Test reading settings from the environment."""

    def test_defaults(self, monkeypatch):
        for name in ("TIMEZONE", "FLAG_THRESHOLD", "DEFAULT_DAILY_COST", "DATABASE_URL", "POSTGRES_URL"):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()
        assert config.timezone == "UTC"
        assert config.flag_threshold == 3
        assert config.default_daily_cost == 8.0

    def test_valid_timezone(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "America/New_York")
        assert Config.from_env().timezone == "America/New_York"

    @pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "../etc/passwd"])
    def test_unknown_timezone(self, monkeypatch, zone):
        monkeypatch.setenv("TIMEZONE", zone)
        with pytest.raises(ValueError, match="TIMEZONE"):
            Config.from_env()

    def test_bad_numbers(self, monkeypatch):
        monkeypatch.setenv("FLAG_THRESHOLD", "three")
        with pytest.raises(ValueError, match="FLAG_THRESHOLD"):
            Config.from_env()

        monkeypatch.setenv("FLAG_THRESHOLD", "0")
        with pytest.raises(ValueError):
            Config.from_env()

    def test_postgres_url_rewritten(self):
        config = Config(database_url="postgres://u:p@host/db")
        assert config.get_database_url() == "postgresql://u:p@host/db"
