"""
Activity ledger data models

Provides immutable data transfer objects returned by the ledger operations,
plus the explicit success/failure result used at the core's boundary.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from greenbot.database.models import ActivityType

T = TypeVar("T")


class ErrorKind(Enum):
    USER_NOT_FOUND = "user_not_found"
    STORE_FAILURE = "store_failure"
    INCONSISTENT_STATE = "inconsistent_state"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a ledger, scoring or leaderboard operation."""
    success: bool
    message: str = ""
    data: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, message=message, error=error)


@dataclass(frozen=True)
class ActivityRecord:
    """Snapshot of one stored activity entry."""
    id: int
    category: ActivityType
    value: float
    recorded_at: datetime


@dataclass(frozen=True)
class ActivityFilter:
    """Inclusive bounds; a bound left as None imposes no constraint."""
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    unit_from: Optional[float] = None
    unit_to: Optional[float] = None
