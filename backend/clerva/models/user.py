from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy import JSON
from sqlalchemy.orm import relationship

from clerva.db.base import Base

CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    hashed_password = Column(String(255), nullable=True)
    image = Column(String(512), nullable=True)
    bio = Column(Text, nullable=True)
    timezone = Column(String(64), nullable=False, default="UTC")
    learning_style = Column(String(32), nullable=True)
    total_points = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    profile_complete = Column(Boolean, nullable=False, default=False)
    preferences = Column(JSON, nullable=False, default=dict)
    availability = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user_subjects = relationship(
        "UserSubject", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
    goals = relationship(
        "Goal", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
    user_achievements = relationship(
        "UserAchievement",
        back_populates="user",
        cascade=CASCADE_ALL_DELETE_ORPHAN,
    )
    participations = relationship(
        "SessionParticipant",
        back_populates="user",
        cascade=CASCADE_ALL_DELETE_ORPHAN,
    )
    created_sessions = relationship(
        "StudySession",
        back_populates="creator",
        cascade=CASCADE_ALL_DELETE_ORPHAN,
    )
    group_memberships = relationship(
        "StudyGroupMember",
        back_populates="user",
        cascade=CASCADE_ALL_DELETE_ORPHAN,
    )
    calendar_events = relationship(
        "CalendarEvent",
        back_populates="user",
        cascade=CASCADE_ALL_DELETE_ORPHAN,
    )
    feedback = relationship("Feedback", back_populates="user")
