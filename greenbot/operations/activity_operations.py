"""
Activity Operations Module

Business logic for the per-user activity ledger: writing new entries,
reading them back through optional filters, and summing a category over a
date range.

Key functionality:
- log_activity(): append an entry, or overwrite today's entry in place for
  categories recorded as a once-per-day current state
- get_activities(): category + inclusive date/value bounds, insertion order
- sum_category(): total value of a category inside a date range

Every public method returns an OperationResult instead of raising; store
errors are wrapped with their message, never with their traceback.
"""

from typing import List, Optional, Union

from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from greenbot.data_models.activity import ActivityFilter, ActivityRecord, ErrorKind, OperationResult
from greenbot.database.models import ActivityEntry, ActivityType, RecordingPolicy, User
from greenbot.utils.activity_exceptions import InconsistentStateError, UserNotFoundError
from greenbot.utils.activity_registry import parse_activity_type, recording_policy
from greenbot.utils.clock import Clock
from greenbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class ActivityOperations:
    """
    Ledger writer, reader and aggregator over the Database record store.

    The clock is shared by the write path and any caller that needs "today",
    so day boundaries always come from a single time source.
    """

    def __init__(self, database, clock: Optional[Clock] = None):
        self.db = database
        self.clock = clock or Clock()
        self.logger = logger

    # ------------------------------------------------------------------
    # Writer
    # ------------------------------------------------------------------

    async def log_activity(
        self,
        user_id: int,
        category: Union[ActivityType, str],
        value: float
    ) -> OperationResult:
        """
        Record one activity for a user.

        CUMULATIVE categories always get a new entry stamped with now.
        CURRENT_STATE_PER_DAY categories overwrite the entry already recorded
        today (value and timestamp) and only append when there is none.

        Callers are expected to reject non-positive values beforehand; the
        sign is not re-validated here.
        """
        category = parse_activity_type(category)

        try:
            message = await self._log_activity(user_id, category, value)
            self.logger.info(message)
            return OperationResult.ok(message=message)
        except UserNotFoundError as e:
            return OperationResult.fail(ErrorKind.USER_NOT_FOUND, e.message)
        except InconsistentStateError as e:
            self.logger.error(e.message)
            return OperationResult.fail(ErrorKind.INCONSISTENT_STATE, e.message)
        except SQLAlchemyError as e:
            self.logger.error(f"Store error logging {category.value} for user {user_id}: {e}", exc_info=True)
            return OperationResult.fail(
                ErrorKind.STORE_FAILURE,
                f"Activity could not be logged for user {user_id}, {e}"
            )
        except RedisError as e:
            # Lock could not be taken, nothing was written
            self.logger.error(f"User write lock failed logging {category.value} for user {user_id}: {e}")
            return OperationResult.fail(
                ErrorKind.STORE_FAILURE,
                f"Activity could not be logged for user {user_id}, {e}"
            )

    async def _log_activity(self, user_id: int, category: ActivityType, value: float) -> str:
        """Single read-modify-write of a user's ledger under the store's user lock."""
        async with self.db.user_write_lock(user_id):
            async with self.db.transaction() as session:
                user = await session.scalar(
                    select(User).where(User.id == user_id).with_for_update()
                )
                if user is None:
                    raise UserNotFoundError(user_id)

                now = self.clock.now()

                if recording_policy(category) is RecordingPolicy.CURRENT_STATE_PER_DAY:
                    day_start, day_end = self.clock.day_bounds(now)
                    todays = await self._query_activities(
                        session, user_id, category,
                        ActivityFilter(date_from=day_start, date_to=day_end)
                    )
                    if todays:
                        existing = todays[0]
                        entry = await session.get(ActivityEntry, existing.id)
                        if entry is None or entry.user_id != user.id:
                            raise InconsistentStateError(user_id, existing.id)

                        entry.category = category
                        entry.value = value
                        entry.recorded_at = now
                        return f"Updated today's {category.value} for user {user_id}"

                session.add(ActivityEntry(
                    user_id=user.id,
                    category=category,
                    value=value,
                    recorded_at=now
                ))
                return f"Logged activity for user {user_id}"

    # ------------------------------------------------------------------
    # Reader
    # ------------------------------------------------------------------

    async def get_activities(
        self,
        user_id: int,
        category: Union[ActivityType, str],
        activity_filter: Optional[ActivityFilter] = None
    ) -> OperationResult:
        """
        Get a user's entries of one category, in insertion order.

        Args:
            user_id: User primary key
            category: Activity type to select
            activity_filter: Optional inclusive bounds on recorded_at and value.
                A bound of 0 is a real bound; only None means "not supplied".

        Returns:
            OperationResult whose data is a list of ActivityRecord
        """
        category = parse_activity_type(category)
        activity_filter = activity_filter or ActivityFilter()

        try:
            async with self.db.get_session() as session:
                user = await session.get(User, user_id)
                if user is None:
                    raise UserNotFoundError(user_id)
                records = await self._query_activities(session, user_id, category, activity_filter)
            return OperationResult.ok(records)
        except UserNotFoundError as e:
            return OperationResult.fail(ErrorKind.USER_NOT_FOUND, e.message)
        except SQLAlchemyError as e:
            self.logger.error(f"Store error reading {category.value} for user {user_id}: {e}", exc_info=True)
            return OperationResult.fail(
                ErrorKind.STORE_FAILURE,
                f"Could not obtain activities for user {user_id}, {e}"
            )

    async def _query_activities(
        self,
        session: AsyncSession,
        user_id: int,
        category: ActivityType,
        activity_filter: ActivityFilter
    ) -> List[ActivityRecord]:
        query = select(ActivityEntry).where(
            ActivityEntry.user_id == user_id,
            ActivityEntry.category == category
        )

        if activity_filter.date_from is not None:
            query = query.where(ActivityEntry.recorded_at >= activity_filter.date_from)
        if activity_filter.date_to is not None:
            query = query.where(ActivityEntry.recorded_at <= activity_filter.date_to)
        if activity_filter.unit_from is not None:
            query = query.where(ActivityEntry.value >= activity_filter.unit_from)
        if activity_filter.unit_to is not None:
            query = query.where(ActivityEntry.value <= activity_filter.unit_to)

        result = await session.execute(query.order_by(ActivityEntry.id))
        return [
            ActivityRecord(
                id=entry.id,
                category=entry.category,
                value=entry.value,
                recorded_at=entry.recorded_at
            )
            for entry in result.scalars()
        ]

    # ------------------------------------------------------------------
    # Aggregator
    # ------------------------------------------------------------------

    async def sum_category(
        self,
        user_id: int,
        category: Union[ActivityType, str],
        date_from,
        date_to
    ) -> OperationResult:
        """Sum of values for one category in [date_from, date_to]; 0 when empty."""
        result = await self.get_activities(
            user_id, category,
            ActivityFilter(date_from=date_from, date_to=date_to)
        )
        if not result.success:
            return result

        return OperationResult.ok(sum((record.value for record in result.data), 0.0))
