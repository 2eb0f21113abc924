from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    JSON,
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


class FeedbackType(str, PyEnum):
    GENERAL = "general"
    BUG = "bug"
    FEATURE = "feature"
    COMPLAINT = "complaint"


class FeedbackStatus(str, PyEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class FeedbackPriority(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    email = Column(String(255), nullable=True)
    category = Column(SQLEnum(FeedbackType), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)
    extra = Column(JSON, nullable=True)  # client metadata: page, browser, ...
    status = Column(SQLEnum(FeedbackStatus), nullable=False, default=FeedbackStatus.OPEN)
    priority = Column(
        SQLEnum(FeedbackPriority), nullable=False, default=FeedbackPriority.LOW
    )
    admin_notes = Column(Text, nullable=True)
    assigned_to = Column(String(255), nullable=True)
    resolution = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="feedback")
