from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.goal import Goal, GoalStatus
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.models.user import User
from clerva.schemas.activity import ActivityItem
from clerva.schemas.session import DashboardStats, UpcomingSession
from clerva.services.activity import build_activity_feed
from clerva.services.dashboard import study_score
from clerva.services.timefmt import format_duration, format_session_time, utc_now

router = APIRouter()

UPCOMING_LIMIT = 5


def _participating(db: Session, user: User):
    return (
        db.query(StudySession)
        .join(SessionParticipant, SessionParticipant.session_id == StudySession.id)
        .filter(SessionParticipant.user_id == user.id)
    )


def _upcoming(db: Session, user: User):
    return _participating(db, user).filter(
        StudySession.status == SessionStatus.SCHEDULED,
        StudySession.start_time >= utc_now(),
    )


@router.get("/sessions", response_model=list[UpcomingSession])
def upcoming_sessions(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> list[UpcomingSession]:
    sessions = _upcoming(db, current_user).order_by(StudySession.start_time).limit(UPCOMING_LIMIT).all()
    now = utc_now()
    return [
        UpcomingSession(
            id=session.id,
            title=session.title,
            subject=session.subject.name if session.subject else "General",
            time=format_session_time(session.start_time, current_user.timezone, now),
            duration=format_duration(session.start_time, session.end_time),
            location=session.location or ("Online" if session.is_virtual else "TBD"),
            participants=len(session.participants),
            type="virtual" if session.is_virtual else "in-person",
            status=session.status,
        )
        for session in sessions
    ]


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> DashboardStats:
    upcoming = _upcoming(db, current_user).count()
    completed = (
        _participating(db, current_user)
        .filter(StudySession.status == SessionStatus.COMPLETED)
        .all()
    )
    goal_counts = {
        goal_status: db.query(Goal)
        .filter(Goal.user_id == current_user.id, Goal.status == goal_status)
        .count()
        for goal_status in (GoalStatus.ACTIVE, GoalStatus.COMPLETED)
    }
    hours = sum((s.end_time - s.start_time).total_seconds() for s in completed) / 3600

    return DashboardStats(
        upcoming_sessions=upcoming,
        completed_sessions=len(completed),
        active_goals=goal_counts[GoalStatus.ACTIVE],
        completed_goals=goal_counts[GoalStatus.COMPLETED],
        total_points=current_user.total_points,
        current_streak=current_user.current_streak,
        study_hours=round(hours, 1),
        study_score=study_score(
            upcoming_sessions=upcoming,
            completed_sessions=len(completed),
            completed_goals=goal_counts[GoalStatus.COMPLETED],
            current_streak=current_user.current_streak,
        ),
    )


@router.get("/activity", response_model=list[ActivityItem])
def recent_activity(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User | None = Depends(deps.get_session_user),  # noqa: B008
) -> list[ActivityItem]:
    # Anonymous visitors get an empty feed rather than a 401
    if current_user is None:
        return []
    return build_activity_feed(db, current_user, utc_now())
