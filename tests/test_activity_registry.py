import pytest

from greenbot.database.models import ActivityType, RecordingPolicy
from greenbot.utils.activity_exceptions import InvalidActivityTypeError
from greenbot.utils.activity_registry import (
    activity_names, is_activity_type, parse_activity_type, recording_policy
)


@pytest.mark.parametrize("name", ["RecycleBoxes", "RoomTemperature", "MilesTravelled", "QuizCompleted"])
def test_registered_names_are_valid(name):
    assert is_activity_type(name)


@pytest.mark.parametrize("name", ["recycleboxes", " RecycleBoxes", "RecycleBoxes ", "Recycle", "", "RECYCLE_BOXES"])
def test_validity_is_exact_and_case_sensitive(name):
    assert not is_activity_type(name)


def test_non_strings_are_not_activity_types():
    assert not is_activity_type(None)
    assert not is_activity_type(3)
    assert not is_activity_type(ActivityType.RECYCLE_BOXES)


def test_parse_activity_type():
    assert parse_activity_type("MilesTravelled") is ActivityType.MILES_TRAVELLED
    assert parse_activity_type(ActivityType.QUIZ_COMPLETED) is ActivityType.QUIZ_COMPLETED

    with pytest.raises(InvalidActivityTypeError):
        parse_activity_type("Composting")


def test_only_temperature_is_recorded_once_per_day():
    assert recording_policy(ActivityType.ROOM_TEMPERATURE) is RecordingPolicy.CURRENT_STATE_PER_DAY
    for category in (ActivityType.RECYCLE_BOXES, ActivityType.MILES_TRAVELLED, ActivityType.QUIZ_COMPLETED):
        assert recording_policy(category) is RecordingPolicy.CUMULATIVE


def test_activity_names_follow_declaration_order():
    assert activity_names() == ["RecycleBoxes", "RoomTemperature", "MilesTravelled", "QuizCompleted"]
