from types import SimpleNamespace

import pytest

from greenbot.config import Config
from greenbot.services.rate_limiter import SWEEP_INTERVAL, SimpleRateLimiter, rate_limit


class FakeTime:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def limiter(fake_time):
    return SimpleRateLimiter(clock=fake_time)


@pytest.mark.asyncio
async def test_calls_beyond_limit_are_rejected(limiter):
    assert await limiter.is_allowed(1, "score", limit=2, window=60)
    assert await limiter.is_allowed(1, "score", limit=2, window=60)
    assert not await limiter.is_allowed(1, "score", limit=2, window=60)


@pytest.mark.asyncio
async def test_limits_are_per_user_and_command(limiter):
    assert await limiter.is_allowed(1, "score", limit=1, window=60)
    assert await limiter.is_allowed(2, "score", limit=1, window=60)
    assert await limiter.is_allowed(1, "leaderboard", limit=1, window=60)
    assert not await limiter.is_allowed(1, "score", limit=1, window=60)


@pytest.mark.asyncio
async def test_window_expiry_allows_new_calls(limiter, fake_time):
    assert await limiter.is_allowed(1, "quiz", limit=1, window=300)
    fake_time.now += 299
    assert not await limiter.is_allowed(1, "quiz", limit=1, window=300)
    fake_time.now += 1
    assert await limiter.is_allowed(1, "quiz", limit=1, window=300)


@pytest.mark.asyncio
async def test_retry_after(limiter, fake_time):
    assert await limiter.retry_after(1, "quiz") == 0
    await limiter.is_allowed(1, "quiz", limit=1, window=300)
    fake_time.now += 100

    assert await limiter.retry_after(1, "quiz") == 200


@pytest.mark.asyncio
async def test_invalid_parameters_are_rejected(limiter):
    assert not await limiter.is_allowed(1, "score", limit=0, window=60)
    assert not await limiter.is_allowed(1, "score", limit=5, window=0)
    assert len(limiter) == 0


@pytest.mark.asyncio
async def test_idle_pairs_are_swept(limiter, fake_time):
    for user_id in range(50):
        await limiter.is_allowed(user_id, "score", limit=5, window=60)
    assert len(limiter) == 50

    fake_time.now += SWEEP_INTERVAL
    await limiter.is_allowed(999, "score", limit=5, window=60)

    assert len(limiter) == 1


@pytest.mark.asyncio
async def test_sweep_keeps_pairs_still_inside_their_window(limiter, fake_time):
    await limiter.is_allowed(1, "quiz", limit=2, window=3600)
    await limiter.is_allowed(2, "score", limit=2, window=60)

    fake_time.now += SWEEP_INTERVAL
    await limiter.is_allowed(3, "score", limit=2, window=60)

    assert len(limiter) == 2
    assert not await limiter.is_allowed(1, "quiz", limit=1, window=3600)


class FakeResponse:
    def __init__(self):
        self.messages = []

    async def send_message(self, content, ephemeral=False):
        self.messages.append(content)


class FakeCog:
    def __init__(self, limiter):
        self.bot = SimpleNamespace(rate_limiter=limiter)
        self.calls = 0

    @rate_limit("score", limit=1, window=60)
    async def score(self, interaction):
        self.calls += 1


def make_interaction(user_id):
    return SimpleNamespace(user=SimpleNamespace(id=user_id), response=FakeResponse())


@pytest.mark.asyncio
async def test_decorator_blocks_and_explains(limiter, monkeypatch):
    monkeypatch.setattr(Config, "OWNER_DISCORD_ID", 1)
    cog = FakeCog(limiter)
    interaction = make_interaction(42)

    await cog.score(interaction)
    await cog.score(interaction)

    assert cog.calls == 1
    assert "`/score` again in 60 seconds" in interaction.response.messages[0]


@pytest.mark.asyncio
async def test_decorator_never_limits_owner(limiter, monkeypatch):
    monkeypatch.setattr(Config, "OWNER_DISCORD_ID", 7)
    cog = FakeCog(limiter)

    for _ in range(3):
        await cog.score(make_interaction(7))

    assert cog.calls == 3
