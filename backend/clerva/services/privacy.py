"""Privacy settings, data export/deletion and retention cleanup."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clerva.models.feedback import Feedback
from clerva.models.study_session import SessionParticipant, StudySession
from clerva.models.user import User
from clerva.schemas.privacy import PrivacySettings, PrivacySettingsUpdate

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 365
MAX_RETENTION_DAYS = 2555  # seven years

PRIVACY_KEY = "privacy"


class RetentionTooLongError(ValueError):
    pass


def get_privacy_settings(user: User) -> PrivacySettings:
    stored = (user.preferences or {}).get(PRIVACY_KEY)
    if not isinstance(stored, dict):
        return PrivacySettings()
    merged = PrivacySettings().dict()
    merged.update({key: value for key, value in stored.items() if key in merged and value is not None})
    try:
        return PrivacySettings(**merged)
    except ValidationError:
        logger.warning(f"Stored privacy settings for user {user.id} are invalid, using defaults")
        return PrivacySettings()


def update_privacy_settings(
    db: Session, user: User, changes: PrivacySettingsUpdate
) -> PrivacySettings:
    updated = get_privacy_settings(user).dict()
    updated.update(changes.dict(exclude_unset=True, exclude_none=True))
    if updated["data_retention_days"] > MAX_RETENTION_DAYS:
        raise RetentionTooLongError("Data retention period exceeds maximum allowed")

    # Reassign so the JSON column is flagged dirty
    preferences = dict(user.preferences or {})
    preferences[PRIVACY_KEY] = updated
    user.preferences = preferences
    db.commit()
    db.refresh(user)
    return PrivacySettings(**updated)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def export_user_data(db: Session, user: User, now: datetime) -> dict[str, Any]:
    sessions = (
        db.query(StudySession)
        .join(SessionParticipant, SessionParticipant.session_id == StudySession.id)
        .filter(SessionParticipant.user_id == user.id)
        .order_by(StudySession.start_time)
        .all()
    )
    feedback = db.query(Feedback).filter(Feedback.user_id == user.id).all()

    return {
        "profile": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "bio": user.bio,
            "timezone": user.timezone,
            "learning_style": user.learning_style,
            "total_points": user.total_points,
            "created_at": _iso(user.created_at),
            "updated_at": _iso(user.updated_at),
        },
        "subjects": [
            {
                "subject_id": link.subject_id,
                "name": link.subject.name,
                "skill_level": link.skill_level.value,
                "is_active": link.is_active,
                "last_studied": _iso(link.last_studied),
            }
            for link in user.user_subjects
        ],
        "goals": [
            {
                "id": goal.id,
                "title": goal.title,
                "category": goal.category.value,
                "target_value": goal.target_value,
                "current_value": goal.current_value,
                "status": goal.status.value,
                "deadline": _iso(goal.deadline),
                "created_at": _iso(goal.created_at),
            }
            for goal in user.goals
        ],
        "study_sessions": [
            {
                "id": session.id,
                "title": session.title,
                "start_time": _iso(session.start_time),
                "end_time": _iso(session.end_time),
                "status": session.status.value,
                "is_creator": session.creator_id == user.id,
            }
            for session in sessions
        ],
        "achievements": [
            {
                "name": earned.achievement.name,
                "points": earned.achievement.points,
                "unlocked_at": _iso(earned.unlocked_at),
            }
            for earned in user.user_achievements
        ],
        "feedback": [
            {
                "id": item.id,
                "type": item.category.value,
                "message": item.message,
                "rating": item.rating,
                "status": item.status.value,
                "created_at": _iso(item.created_at),
            }
            for item in feedback
        ],
        "export_date": now.isoformat(),
    }


def delete_user_data(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()


def cleanup_expired_data(db: Session, now: datetime | None = None) -> dict[str, int]:
    """Drop each user's feedback and finished sessions past their retention window."""
    now = now or datetime.utcnow()
    deleted = 0
    errors = 0

    for user in db.query(User).all():
        try:
            cutoff = now - timedelta(days=get_privacy_settings(user).data_retention_days)
            deleted += (
                db.query(Feedback)
                .filter(Feedback.user_id == user.id, Feedback.created_at < cutoff)
                .delete(synchronize_session=False)
            )
            expired_sessions = (
                db.query(StudySession)
                .filter(StudySession.creator_id == user.id, StudySession.end_time < cutoff)
                .all()
            )
            for session in expired_sessions:
                db.delete(session)
            deleted += len(expired_sessions)
            db.commit()
        except (SQLAlchemyError, OverflowError):
            db.rollback()
            logger.error(f"Error cleaning up data for user {user.id}", exc_info=True)
            errors += 1

    logger.info(f"Retention cleanup finished: deleted={deleted} errors={errors}")
    return {"deleted": deleted, "errors": errors}
