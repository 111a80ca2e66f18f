"""
Leaderboard service

Ranks every named user by their score for a shared date range. The board is
rebuilt on every request.
"""

from datetime import datetime
import logging

from sqlalchemy.exc import SQLAlchemyError

from greenbot.data_models.activity import ErrorKind, OperationResult
from greenbot.data_models.leaderboard import LeaderboardEntry
from greenbot.services.base import BaseService
from greenbot.services.score import ScoreService

logger = logging.getLogger(__name__)


class LeaderboardService(BaseService):
    """Service for leaderboard ranking over all users."""

    def __init__(self, activity_ops, score_service: ScoreService = None):
        super().__init__(activity_ops)
        self.score_service = score_service or ScoreService(activity_ops)

    async def build_leaderboard(self, date_from: datetime, date_to: datetime) -> OperationResult:
        """
        Build the ranked leaderboard for [date_from, date_to].

        - Users without a username are skipped.
        - Any single user's score failure fails the whole build with that
          user's message; no partial board is returned.
        - Sorted by score descending (stable, so ties keep store order).
        - Ranks are sequential: rank = position + 1, ties still get distinct
          consecutive ranks (50, 50, 30 -> 1, 2, 3).

        Returns:
            OperationResult whose data is a list of LeaderboardEntry
        """
        try:
            users = await self.db.get_all_users()
        except SQLAlchemyError as e:
            logger.error(f"Unable to load users for leaderboard: {e}", exc_info=True)
            return OperationResult.fail(ErrorKind.STORE_FAILURE, f"Unable to get leaderboard, {e}")

        scored = []
        for user in users:
            if not user.username:
                continue

            score = await self.score_service.compute_score(user.id, date_from, date_to)
            if not score.success:
                logger.error(f"Leaderboard aborted on user {user.id}: {score.message}")
                return OperationResult.fail(score.error, score.message)

            scored.append((user.username, score.data))

        scored.sort(key=lambda row: row[1], reverse=True)

        entries = [
            LeaderboardEntry(username=username, score=score, rank=index + 1)
            for index, (username, score) in enumerate(scored)
        ]
        logger.info(f"Built leaderboard with {len(entries)} users for {date_from} - {date_to}")
        return OperationResult.ok(entries)
