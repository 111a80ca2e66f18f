"""
Leaderboard and score data models

Provides immutable data transfer objects for scores and leaderboard rows.
These are derived on every request and never persisted.
"""

from dataclasses import dataclass, field
from typing import Dict

from greenbot.database.models import ActivityType


@dataclass(frozen=True)
class LeaderboardEntry:
    """Single leaderboard row."""
    username: str
    score: float
    rank: int


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-category totals and the points each contributed."""
    totals: Dict[ActivityType, float] = field(default_factory=dict)
    points: Dict[ActivityType, float] = field(default_factory=dict)

    @property
    def score(self) -> float:
        return sum(self.points.values())
