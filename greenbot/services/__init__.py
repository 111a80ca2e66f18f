"""
Services package for the GreenBot sustainability tracker.
"""

from .base import BaseService
from .leaderboard import LeaderboardService
from .quiz import QuizService
from .rate_limiter import SimpleRateLimiter
from .score import ScoreService

__all__ = ['BaseService', 'LeaderboardService', 'QuizService', 'ScoreService', 'SimpleRateLimiter']
