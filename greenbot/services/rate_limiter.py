"""
Per-user command rate limiting.

Each user:command pair keeps the timestamps of its recent calls inside a
sliding window. Pairs whose newest call has left its window are swept
periodically, so memory follows the set of recently active users.
"""

import asyncio
import logging
import time
from collections import deque
from functools import wraps
from typing import Callable, Deque, Dict

from greenbot.config import Config

logger = logging.getLogger(__name__)

# Seconds between sweeps of idle user:command pairs
SWEEP_INTERVAL = 300


class SimpleRateLimiter:
    """In-memory sliding-window rate limiter, local to one bot process."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = {}
        self._windows: Dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    def __len__(self):
        return len(self._requests)

    async def is_allowed(self, user_id: int, command: str, limit: int, window: int) -> bool:
        """Record a call and report whether it fits in the user's window."""
        if limit <= 0 or window <= 0:
            return False

        key = f"{user_id}:{command}"
        now = self._clock()

        async with self._lock:
            if now - self._last_sweep >= SWEEP_INTERVAL:
                self._sweep(now)

            calls = self._requests.setdefault(key, deque())
            self._windows[key] = window
            while calls and calls[0] <= now - window:
                calls.popleft()

            if len(calls) >= limit:
                return False
            calls.append(now)
            return True

    async def retry_after(self, user_id: int, command: str) -> float:
        """Seconds until the oldest call of a user:command pair leaves its window."""
        key = f"{user_id}:{command}"
        async with self._lock:
            calls = self._requests.get(key)
            if not calls:
                return 0.0
            return max(0.0, calls[0] + self._windows[key] - self._clock())

    def _sweep(self, now: float):
        idle = [
            key for key, calls in self._requests.items()
            if not calls or calls[-1] <= now - self._windows[key]
        ]
        for key in idle:
            del self._requests[key]
            del self._windows[key]
        self._last_sweep = now
        if idle:
            logger.debug(f"Dropped {len(idle)} idle rate limit entries")


def rate_limit(command: str, limit: int = 1, window: int = 60):
    """Decorator for cog slash commands; the bot owner is never limited."""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, interaction, *args, **kwargs):
            if interaction.user.id == Config.OWNER_DISCORD_ID:
                return await func(self, interaction, *args, **kwargs)

            rate_limiter = self.bot.rate_limiter
            if not await rate_limiter.is_allowed(interaction.user.id, command, limit, window):
                wait = await rate_limiter.retry_after(interaction.user.id, command)
                logger.info(f"Rate limit hit on /{command} by user {interaction.user.id}")
                await interaction.response.send_message(
                    f"⏰ Slow down! You can use `/{command}` again in {wait:.0f} seconds.",
                    ephemeral=True
                )
                return

            return await func(self, interaction, *args, **kwargs)
        return wrapper
    return decorator
