from datetime import datetime, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.feedback import Feedback, FeedbackPriority, FeedbackStatus
from clerva.models.goal import Goal, GoalStatus
from clerva.models.study_session import SessionStatus, StudySession
from clerva.models.subject import Subject
from clerva.models.user import User
from clerva.schemas.activity import AdminActivity
from clerva.schemas.admin import (
    AdminUserList,
    ContentTotals,
    DashboardOverview,
    FeedbackTotals,
    UserCounts,
    UserStats,
    UserTotals,
)
from clerva.schemas.user import AdminUserPublic
from clerva.services.activity import build_admin_activity

router = APIRouter()


def _start_of_today(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _user_counts(db: Session, now: datetime) -> UserCounts:
    return UserCounts(
        total_users=db.query(User).count(),
        active_users=db.query(User).filter(User.is_active.is_(True)).count(),
        new_users_today=db.query(User).filter(User.created_at >= _start_of_today(now)).count(),
    )


@router.get("/users", response_model=AdminUserList)
def list_users(
    db: Session = Depends(get_db),  # noqa: B008
    _founder: User = Depends(deps.require_founder),  # noqa: B008
) -> AdminUserList:
    users = db.query(User).order_by(User.created_at.desc()).all()
    return AdminUserList(
        users=[AdminUserPublic.model_validate(user) for user in users],
        stats=_user_counts(db, datetime.utcnow()),
    )


@router.get("/user-stats", response_model=UserStats)
def user_stats(
    db: Session = Depends(get_db),  # noqa: B008
    _founder: User = Depends(deps.require_founder),  # noqa: B008
) -> UserStats:
    now = datetime.utcnow()
    sessions = db.query(StudySession.start_time, StudySession.end_time).all()
    average_hours = (
        sum((end - start).total_seconds() for start, end in sessions) / 3600 / len(sessions)
        if sessions
        else 0.0
    )
    return UserStats(
        **_user_counts(db, now).dict(),
        new_users_this_week=db.query(User).filter(User.created_at >= now - timedelta(days=7)).count(),
        average_session_hours=round(average_hours, 1),
    )


@router.get("/dashboard-stats", response_model=DashboardOverview)
def dashboard_stats(
    db: Session = Depends(get_db),  # noqa: B008
    _founder: User = Depends(deps.require_founder),  # noqa: B008
) -> DashboardOverview:
    week_ago = datetime.utcnow() - timedelta(days=7)
    return DashboardOverview(
        users=UserTotals(
            total=db.query(User).count(),
            active=db.query(User).filter(User.is_active.is_(True)).count(),
            new_this_week=db.query(User).filter(User.created_at >= week_ago).count(),
        ),
        content=ContentTotals(
            subjects=db.query(Subject).count(),
            goals=db.query(Goal).count(),
            completed_goals=db.query(Goal).filter(Goal.status == GoalStatus.COMPLETED).count(),
            study_sessions=db.query(StudySession).count(),
            completed_sessions=db.query(StudySession)
            .filter(StudySession.status == SessionStatus.COMPLETED)
            .count(),
        ),
        feedback=FeedbackTotals(
            total=db.query(Feedback).count(),
            open=db.query(Feedback).filter(Feedback.status == FeedbackStatus.OPEN).count(),
            critical=db.query(Feedback)
            .filter(Feedback.priority == FeedbackPriority.CRITICAL)
            .count(),
        ),
    )


@router.get("/recent-activity", response_model=list[AdminActivity])
def recent_activity(
    db: Session = Depends(get_db),  # noqa: B008
    _founder: User = Depends(deps.require_founder),  # noqa: B008
) -> list[AdminActivity]:
    return build_admin_activity(db, datetime.utcnow())
