"""
Score service

Combines a user's per-category totals over a date range into one score.
Scores are derived on demand and never stored.
"""

import logging
from datetime import datetime

from greenbot.data_models.activity import OperationResult
from greenbot.data_models.leaderboard import ScoreBreakdown
from greenbot.database.models import ActivityType
from greenbot.services.base import BaseService
from greenbot.utils.scoring_strategies import ScoringStrategyFactory

logger = logging.getLogger(__name__)


class ScoreService(BaseService):
    """Per-user score for a (date_from, date_to) range."""

    async def compute_breakdown(self, user_id: int, date_from: datetime, date_to: datetime) -> OperationResult:
        """
        Sum every category in the range and score each total with its strategy.

        Stops at the first failing category sum and returns that failure
        unchanged.

        Returns:
            OperationResult whose data is a ScoreBreakdown
        """
        totals = {}
        points = {}
        for category in ActivityType:
            total = await self.activity_ops.sum_category(user_id, category, date_from, date_to)
            if not total.success:
                return total

            totals[category] = total.data
            points[category] = ScoringStrategyFactory.for_category(category).points(total.data)

        breakdown = ScoreBreakdown(totals=totals, points=points)
        logger.debug(f"Score for user {user_id} between {date_from} and {date_to}: {breakdown.score}")
        return OperationResult.ok(breakdown)

    async def compute_score(self, user_id: int, date_from: datetime, date_to: datetime) -> OperationResult:
        """
        Score = recycling + comfort-band(temperature) + miles + quiz points.

        Returns:
            OperationResult whose data is the score as a float
        """
        result = await self.compute_breakdown(user_id, date_from, date_to)
        if not result.success:
            return result
        return OperationResult.ok(result.data.score)
