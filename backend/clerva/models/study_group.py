from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from clerva.db.base import Base


class GroupRole(str, PyEnum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


MANAGING_ROLES = (GroupRole.OWNER, GroupRole.ADMIN)


class StudyGroup(Base):
    __tablename__ = "study_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    subject_id = Column(
        Integer, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True
    )
    max_members = Column(Integer, nullable=False, default=10)
    is_private = Column(Boolean, nullable=False, default=False)
    location = Column(String(200), nullable=True)
    timezone = Column(String(64), nullable=True)
    schedule = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    subject = relationship("Subject")
    members = relationship(
        "StudyGroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="StudyGroupMember.joined_at",
    )


class StudyGroupMember(Base):
    __tablename__ = "study_group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_study_group_members_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(
        Integer, ForeignKey("study_groups.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(SQLEnum(GroupRole), nullable=False, default=GroupRole.MEMBER)
    joined_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    group = relationship("StudyGroup", back_populates="members")
    user = relationship("User", back_populates="group_memberships")
