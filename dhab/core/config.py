"""
Configuration management for Dhab.

Loads settings from environment variables (and a .env file when the
entry point has called load_dotenv).
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _env_float(name: str, default: float) -> float:
    """Read a float environment variable."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_timezone(name: str, default: str) -> str:
    """Read an IANA timezone name."""
    value = os.getenv(name) or default
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"{name} must be an IANA timezone, got {value!r}")
    return value


@dataclass
class Config:
    """Application configuration."""

    # Database
    database_path: str = "data/dhab.db"
    database_url: Optional[str] = None  # Overrides database_path (e.g. Postgres)

    # Sobriety defaults
    default_daily_cost: float = 8.0

    # Community moderation
    flag_threshold: int = 3

    # Timezone used to interpret stored start dates
    timezone: str = "UTC"

    # Thirdweb in-app wallet
    thirdweb_client_id: Optional[str] = None
    thirdweb_api_url: str = "https://api.thirdweb.com"

    # HTTP API
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Mode: LIVE or TEST
    mode: str = "TEST"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        flag_threshold = _env_int("FLAG_THRESHOLD", 3)
        if flag_threshold < 1:
            raise ValueError("FLAG_THRESHOLD must be at least 1")

        default_daily_cost = _env_float("DEFAULT_DAILY_COST", 8.0)
        if default_daily_cost < 0:
            raise ValueError("DEFAULT_DAILY_COST cannot be negative")

        origins = os.getenv("CORS_ORIGINS", "*")

        return cls(
            database_path=os.getenv("DHAB_DB_PATH", "data/dhab.db"),
            database_url=os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL"),
            default_daily_cost=default_daily_cost,
            flag_threshold=flag_threshold,
            timezone=_env_timezone("TIMEZONE", "UTC"),
            thirdweb_client_id=os.getenv("THIRDWEB_CLIENT_ID"),
            thirdweb_api_url=os.getenv("THIRDWEB_API_URL", "https://api.thirdweb.com").rstrip("/"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            mode=os.getenv("MODE", "TEST").upper(),
        )

    def get_database_url(self) -> str:
        """SQLAlchemy URL for the configured database."""
        if self.database_url:
            # Vercel/Heroku style postgres:// URLs
            if self.database_url.startswith("postgres://"):
                return "postgresql://" + self.database_url[len("postgres://"):]
            return self.database_url
        return f"sqlite:///{self.database_path}"

    def get_summary(self) -> str:
        """Get a summary of current settings."""
        database = self.database_url and "external database" or self.database_path
        client_id = "configured" if self.thirdweb_client_id else "not configured"
        return f"""Mode: {self.mode}
Database: {database}
Timezone: {self.timezone}

Sobriety:
  Default Daily Cost: ${self.default_daily_cost:,.2f}

Community:
  Flag Threshold: {self.flag_threshold} flags hides content

Wallet Login:
  Thirdweb Client ID: {client_id}
  Thirdweb API: {self.thirdweb_api_url}
"""
