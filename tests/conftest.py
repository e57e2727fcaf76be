"""
Shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dhab.core.config import Config
from dhab.core.db import dispose_engines, init_db


@pytest.fixture
def config(tmp_path):
    """Config backed by a fresh SQLite file."""
    cfg = Config(database_path=str(tmp_path / "dhab.db"))
    init_db(cfg)
    yield cfg
    dispose_engines()
