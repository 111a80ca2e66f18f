"""
Input validation for activity submissions.

The ledger trusts its callers, so the command layer checks values here before
anything is written.
"""

import math
from typing import Optional

from greenbot.constants import ScoringConstants, ValidationConstants
from greenbot.database.models import ActivityType
from greenbot.utils.activity_exceptions import ActivityValidationError


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * ScoringConstants.CELSIUS_SCALE + ScoringConstants.CELSIUS_OFFSET


def validate_activity_value(category: ActivityType, value: Optional[float], unit: Optional[str] = None) -> float:
    """
    Validate a submitted value and normalize its unit.

    Room temperature may be given in Celsius (unit "C") and is stored in
    Fahrenheit; every other category takes the value as-is.

    Raises:
        ActivityValidationError: If the value is missing, not finite, not
            positive, too large, or the unit does not apply
    """
    if value is None:
        raise ActivityValidationError(value, "You must specify the units")
    if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
        raise ActivityValidationError(value, "Invalid value!")

    unit = (unit or "").strip().upper()
    if unit:
        if category is not ActivityType.ROOM_TEMPERATURE:
            raise ActivityValidationError(value, "Units can only be chosen for room temperature")
        if unit not in ("C", "F"):
            raise ActivityValidationError(value, "Temperature unit must be C or F")
        if unit == "C":
            value = celsius_to_fahrenheit(value)

    if value <= 0:
        raise ActivityValidationError(value, "Value must be greater than 0!")
    if value > ValidationConstants.MAX_ACTIVITY_VALUE:
        raise ActivityValidationError(value, f"Value must be at most {ValidationConstants.MAX_ACTIVITY_VALUE:,}!")

    return float(value)
