"""
Activity type registry: validity checks and per-category recording policies.
"""

from typing import Any, Dict
from greenbot.database.models import ActivityType, RecordingPolicy
from greenbot.utils.activity_exceptions import InvalidActivityTypeError

_ACTIVITY_NAMES = frozenset(activity.value for activity in ActivityType)

RECORDING_POLICIES: Dict[ActivityType, RecordingPolicy] = {
    ActivityType.RECYCLE_BOXES: RecordingPolicy.CUMULATIVE,
    ActivityType.ROOM_TEMPERATURE: RecordingPolicy.CURRENT_STATE_PER_DAY,
    ActivityType.MILES_TRAVELLED: RecordingPolicy.CUMULATIVE,
    ActivityType.QUIZ_COMPLETED: RecordingPolicy.CUMULATIVE,
}

_unmapped = set(ActivityType) - set(RECORDING_POLICIES)
if _unmapped:
    raise RuntimeError(f"Activity types without a recording policy: {sorted(a.value for a in _unmapped)}")


def is_activity_type(value: Any) -> bool:
    """True iff value is exactly one of the activity names (case-sensitive, untrimmed)."""
    return isinstance(value, str) and value in _ACTIVITY_NAMES


def parse_activity_type(value: Any) -> ActivityType:
    """
    Convert a public activity name into an ActivityType.

    Raises:
        InvalidActivityTypeError: If the name is not registered
    """
    if isinstance(value, ActivityType):
        return value
    if not is_activity_type(value):
        raise InvalidActivityTypeError(value)
    return ActivityType(value)


def recording_policy(category: ActivityType) -> RecordingPolicy:
    return RECORDING_POLICIES[category]


def activity_names() -> list:
    """Public names in declaration order, for autocomplete and help text"""
    return [activity.value for activity in ActivityType]
