from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from clerva.db.base import Base


class EventType(str, PyEnum):
    STUDY_SESSION = "study_session"
    GROUP_STUDY = "group_study"
    EXAM = "exam"
    ASSIGNMENT = "assignment"
    MEETING = "meeting"
    REMINDER = "reminder"


class CalendarEvent(Base):
    """A personal calendar entry owned by one user."""

    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    event_type = Column(SQLEnum(EventType), nullable=False, default=EventType.STUDY_SESSION)
    location = Column(String(255), nullable=True)
    is_all_day = Column(Boolean, nullable=False, default=False)
    color = Column(String(16), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="calendar_events")
