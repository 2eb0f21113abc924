from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clerva.db.base import Base


class SkillLevel(str, PyEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Subject(Base):
    """Catalog entry shared by every user."""

    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    user_subjects = relationship(
        "UserSubject", back_populates="subject", cascade="all, delete-orphan"
    )
    sessions = relationship("StudySession", back_populates="subject")


class UserSubject(Base):
    __tablename__ = "user_subjects"
    __table_args__ = (
        UniqueConstraint("user_id", "subject_id", name="uq_user_subjects_user_subject"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    subject_id: Mapped[int] = mapped_column(ForeignKey("subjects.id", ondelete="CASCADE"))
    skill_level: Mapped[SkillLevel] = mapped_column(
        SQLEnum(SkillLevel), nullable=False, default=SkillLevel.BEGINNER
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_studied: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    user = relationship("User", back_populates="user_subjects")
    subject: Mapped[Subject] = relationship("Subject", back_populates="user_subjects")
