"""Recent-activity feeds for the dashboard and the founder console."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from clerva.models.achievement import UserAchievement
from clerva.models.feedback import Feedback, FeedbackPriority
from clerva.models.study_group import GroupRole, StudyGroup, StudyGroupMember
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.models.user import User
from clerva.schemas.activity import ActivityItem, AdminActivity

FEED_LIMIT = 8
ADMIN_FEED_LIMIT = 10
PER_SOURCE = 2
WEEK = timedelta(days=7)
SCHEDULED_WINDOW = timedelta(days=3)

FEEDBACK_SEVERITY = {
    FeedbackPriority.CRITICAL: "error",
    FeedbackPriority.HIGH: "warning",
}


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def relative_time(moment: datetime, now: datetime) -> str:
    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return f"{max(seconds, 0)} seconds ago"
    if seconds < 3600:
        return _plural(seconds // 60, "minute")
    if seconds < 86400:
        return _plural(seconds // 3600, "hour")
    if seconds < 7 * 86400:
        return _plural(seconds // 86400, "day")
    return moment.strftime("%Y-%m-%d")


def _item(now: datetime, **fields) -> ActivityItem:
    return ActivityItem(time=relative_time(fields["timestamp"], now), **fields)


def build_activity_feed(db: Session, user: User, now: datetime) -> list[ActivityItem]:
    """Most recent first, at most ``FEED_LIMIT`` entries."""
    mine = (
        db.query(StudySession)
        .join(SessionParticipant, SessionParticipant.session_id == StudySession.id)
        .filter(SessionParticipant.user_id == user.id)
    )
    completed = (
        mine.filter(
            StudySession.status == SessionStatus.COMPLETED,
            StudySession.end_time >= now - WEEK,
        )
        .order_by(StudySession.end_time.desc())
        .limit(PER_SOURCE)
        .all()
    )
    scheduled = (
        mine.filter(
            StudySession.status == SessionStatus.SCHEDULED,
            StudySession.created_at >= now - SCHEDULED_WINDOW,
        )
        .order_by(StudySession.created_at.desc())
        .limit(PER_SOURCE)
        .all()
    )
    achievements = (
        db.query(UserAchievement)
        .filter(UserAchievement.user_id == user.id, UserAchievement.unlocked_at >= now - WEEK)
        .order_by(UserAchievement.unlocked_at.desc())
        .limit(PER_SOURCE)
        .all()
    )
    joins = (
        db.query(StudyGroupMember)
        .filter(StudyGroupMember.user_id == user.id, StudyGroupMember.joined_at >= now - WEEK)
        .order_by(StudyGroupMember.joined_at.desc())
        .limit(PER_SOURCE)
        .all()
    )

    activities = [
        _item(
            now,
            id=f"completed-{session.id}",
            type="session_completed",
            content=f"Completed study session: {session.title}",
            timestamp=session.end_time,
            action_url=f"/sessions/{session.id}/feedback",
            action_text="Rate Session",
        )
        for session in completed
    ]
    activities += [
        _item(
            now,
            id=f"scheduled-{session.id}",
            type="session_scheduled",
            content=f"New session scheduled: {session.title}",
            timestamp=session.created_at,
            action_url="/calendar",
            action_text="View Calendar",
        )
        for session in scheduled
    ]
    activities += [
        _item(
            now,
            id=f"achievement-{unlocked.id}",
            type="achievement",
            content=f"Achievement unlocked: {unlocked.achievement.name}",
            timestamp=unlocked.unlocked_at,
            action_url="/profile",
            action_text="View Achievements",
        )
        for unlocked in achievements
    ]
    activities += [
        _item(
            now,
            id=f"group-{membership.id}",
            type="group_joined",
            content=(
                f"You created the study group {membership.group.name}"
                if membership.role == GroupRole.OWNER
                else f"You joined the study group {membership.group.name}"
            ),
            timestamp=membership.joined_at,
            action_url="/study-groups",
            action_text="View Group",
        )
        for membership in joins
    ]

    activities.sort(key=lambda item: item.timestamp, reverse=True)
    return activities[:FEED_LIMIT]


def build_admin_activity(db: Session, now: datetime) -> list[AdminActivity]:
    """Platform-wide signups, feedback and new groups from the last week."""
    since = now - WEEK
    signups = (
        db.query(User)
        .filter(User.created_at >= since)
        .order_by(User.created_at.desc())
        .limit(ADMIN_FEED_LIMIT)
        .all()
    )
    feedback = (
        db.query(Feedback)
        .filter(Feedback.created_at >= since)
        .order_by(Feedback.created_at.desc())
        .limit(ADMIN_FEED_LIMIT)
        .all()
    )
    groups = (
        db.query(StudyGroup)
        .filter(StudyGroup.created_at >= since)
        .order_by(StudyGroup.created_at.desc())
        .limit(ADMIN_FEED_LIMIT)
        .all()
    )

    activities = [
        AdminActivity(
            id=f"user-{user.id}",
            type="user_signup",
            message=f"New user registration: {user.email}",
            timestamp=user.created_at,
            severity="info",
        )
        for user in signups
    ]
    activities += [
        AdminActivity(
            id=f"feedback-{item.id}",
            type="feedback_submitted",
            message=f"New {item.category.value} feedback: {item.title}",
            timestamp=item.created_at,
            severity=FEEDBACK_SEVERITY.get(item.priority, "info"),
        )
        for item in feedback
    ]
    activities += [
        AdminActivity(
            id=f"group-{group.id}",
            type="group_created",
            message=f"Study group created: {group.name}",
            timestamp=group.created_at,
            severity="success",
        )
        for group in groups
    ]

    activities.sort(key=lambda item: item.timestamp, reverse=True)
    return activities[:ADMIN_FEED_LIMIT]
