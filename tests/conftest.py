"""
Shared pytest fixtures: a fresh file-backed SQLite record store per test and
a clock pinned to a known instant.
"""

from datetime import datetime

import pytest
import pytest_asyncio

from greenbot.config import Config
from greenbot.database.database import Database
from greenbot.operations import ActivityOperations
from greenbot.services.leaderboard import LeaderboardService
from greenbot.services.score import ScoreService
from greenbot.utils.clock import FixedClock


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    """Keep tests on in-process user locks."""
    monkeypatch.setattr(Config, "REDIS_URL", "")


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 6, 10, 9, 30))


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'test_greenbot.db'}")
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def ops(db, clock):
    return ActivityOperations(db, clock)


@pytest.fixture
def score_service(ops):
    return ScoreService(ops)


@pytest.fixture
def leaderboard_service(ops, score_service):
    return LeaderboardService(ops, score_service)
