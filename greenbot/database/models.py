from sqlalchemy import (
    Column, Integer, String, DateTime, Float, BigInteger,
    ForeignKey, Index, Enum as SQLEnum
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
from enum import Enum

Base = declarative_base()

class ActivityType(Enum):
    """Closed set of loggable sustainability actions.

    The value is the public name used by commands and stored filters.
    """
    RECYCLE_BOXES = "RecycleBoxes"
    ROOM_TEMPERATURE = "RoomTemperature"      # Fahrenheit reading, one per day
    MILES_TRAVELLED = "MilesTravelled"
    QUIZ_COMPLETED = "QuizCompleted"          # Points earned on a quiz

class RecordingPolicy(Enum):
    """How a new entry of a category interacts with existing ones"""
    CUMULATIVE = "cumulative"                        # Every log is a new entry
    CURRENT_STATE_PER_DAY = "current_state_per_day"  # One entry per calendar day, overwritten in place

class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    discord_id = Column(BigInteger, unique=True, nullable=True, index=True)
    # Users without a username are never shown on leaderboards
    username = Column(String(100), unique=True, nullable=True)
    display_name = Column(String(100))

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    activities = relationship(
        "ActivityEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="ActivityEntry.id"
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"

class ActivityEntry(Base):
    __tablename__ = 'activity_entries'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    category = Column(SQLEnum(ActivityType), nullable=False)
    value = Column(Float, nullable=False)  # Unit implied by category
    recorded_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="activities")

    __table_args__ = (
        Index('idx_activity_user_category_recorded', 'user_id', 'category', 'recorded_at'),
    )

    def __repr__(self):
        return f"<ActivityEntry(user_id={self.user_id}, category={self.category.value}, value={self.value})>"
