from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from clerva.db.base import Base


class GoalStatus(str, PyEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class GoalCategory(str, PyEnum):
    STUDY_HOURS = "study_hours"
    STUDY_SESSIONS = "study_sessions"
    ASSIGNMENTS = "assignments"
    POINTS = "points"
    CUSTOM = "custom"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(SQLEnum(GoalCategory), nullable=False, default=GoalCategory.CUSTOM)
    target_value = Column(Float, nullable=False, default=100)
    current_value = Column(Float, nullable=False, default=0)
    unit = Column(String(50), nullable=True)
    deadline = Column(DateTime, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    status = Column(SQLEnum(GoalStatus), nullable=False, default=GoalStatus.ACTIVE)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="goals")
