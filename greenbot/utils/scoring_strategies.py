"""
Scoring Strategy Pattern for per-category activity points

Each activity category turns its period total into points through a strategy:
- Linear: the total passes through unchanged (more activity, more points)
- Comfort band: a triangular reward peaking at a setpoint and falling
  linearly to zero at +/- setpoint away, never negative

The category -> strategy table is total over ActivityType and is checked at
import time, so a new category cannot be added without deciding how it scores.
"""

from abc import ABC, abstractmethod
from typing import Dict
from greenbot.constants import ScoringConstants
from greenbot.database.models import ActivityType
import logging

logger = logging.getLogger(__name__)

class ScoringStrategy(ABC):
    """Converts one category's total into points."""

    @abstractmethod
    def points(self, total: float) -> float:
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get human-readable name of this strategy"""
        pass

class LinearStrategy(ScoringStrategy):
    """Pass-through: points equal the raw unit total."""

    def points(self, total: float) -> float:
        return total

    def get_strategy_name(self) -> str:
        return "Linear"

class ComfortBandStrategy(ScoringStrategy):
    """
    Triangular reward around a comfort setpoint.

    points = max(0, setpoint - |total - setpoint|)

    With the default setpoint of 72: 72 -> 72 points, 60 -> 60,
    0 or 144 -> 0. Values further away are floored at zero so they never
    subtract from other categories.
    """

    def __init__(self, setpoint: float = ScoringConstants.COMFORT_SETPOINT_F):
        self.setpoint = setpoint

    def points(self, total: float) -> float:
        return max(0.0, self.setpoint - abs(total - self.setpoint))

    def get_strategy_name(self) -> str:
        return f"Comfort band ({self.setpoint:g})"

class ScoringStrategyFactory:
    """Maps every activity category to its scoring strategy"""

    _STRATEGIES: Dict[ActivityType, ScoringStrategy] = {
        ActivityType.RECYCLE_BOXES: LinearStrategy(),
        ActivityType.ROOM_TEMPERATURE: ComfortBandStrategy(),
        ActivityType.MILES_TRAVELLED: LinearStrategy(),
        ActivityType.QUIZ_COMPLETED: LinearStrategy(),
    }

    @classmethod
    def for_category(cls, category: ActivityType) -> ScoringStrategy:
        return cls._STRATEGIES[category]

    @classmethod
    def validate(cls):
        missing = set(ActivityType) - set(cls._STRATEGIES)
        if missing:
            raise RuntimeError(f"Activity types without a scoring strategy: {sorted(a.value for a in missing)}")

ScoringStrategyFactory.validate()
