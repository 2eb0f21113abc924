import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.goal import Goal, GoalCategory, GoalStatus
from clerva.models.user import User
from clerva.schemas.goal import (
    GoalCreate,
    GoalFilters,
    GoalList,
    GoalProgressResponse,
    GoalProgressUpdate,
    GoalResponse,
    GoalStats,
)
from clerva.services import goals as goal_service
from clerva.services.timefmt import to_naive_utc

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_LIST_LIMIT = 100


def _goal_stats(goals: list[Goal], now: datetime) -> GoalStats:
    total = len(goals)
    completed = sum(1 for goal in goals if goal.status == GoalStatus.COMPLETED)
    return GoalStats(
        total=total,
        active=sum(1 for goal in goals if goal.status == GoalStatus.ACTIVE),
        completed=completed,
        overdue=sum(1 for goal in goals if goal_service.is_overdue(goal, now)),
        completion_rate=round(completed / total * 100, 1) if total else 0.0,
    )


@router.get("", response_model=GoalList)
def list_goals(
    status_filter: GoalStatus | None = Query(default=None, alias="status"),  # noqa: B008
    category: GoalCategory | None = None,
    limit: int = Query(default=50, ge=1),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> GoalList:
    now = datetime.utcnow()
    query = db.query(Goal).filter(Goal.user_id == current_user.id)
    if status_filter:
        query = query.filter(Goal.status == status_filter)
    if category:
        query = query.filter(Goal.category == category)
    goals = query.order_by(Goal.created_at.desc()).limit(min(limit, MAX_LIST_LIMIT)).all()

    all_goals = db.query(Goal).filter(Goal.user_id == current_user.id).all()
    return GoalList(
        goals=[goal_service.to_public(goal, now) for goal in goals],
        stats=_goal_stats(all_goals, now),
        filters=GoalFilters(status=status_filter, category=category),
    )


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(
    payload: GoalCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> GoalResponse:
    active = (
        db.query(Goal)
        .filter(Goal.user_id == current_user.id, Goal.status == GoalStatus.ACTIVE)
        .count()
    )
    if active >= goal_service.MAX_ACTIVE_GOALS:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can have at most {goal_service.MAX_ACTIVE_GOALS} active goals",
        )
    goal = Goal(
        user_id=current_user.id,
        title=payload.title.strip(),
        description=payload.description,
        category=payload.category,
        target_value=payload.target,
        current_value=0,
        unit=payload.unit,
        deadline=to_naive_utc(payload.deadline) if payload.deadline else None,
        is_public=payload.is_public,
    )
    db.add(goal)
    current_user.total_points += goal_service.CREATE_POINTS
    db.commit()
    db.refresh(goal)
    return GoalResponse(
        goal=goal_service.to_public(goal, datetime.utcnow()),
        message="Goal created successfully",
    )


@router.patch("", response_model=GoalProgressResponse)
def update_goal_progress(
    payload: GoalProgressUpdate,
    goal_id: int | None = Query(default=None, alias="id"),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> GoalProgressResponse:
    if goal_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Goal ID is required")
    goal = (
        db.query(Goal)
        .filter(
            Goal.id == goal_id,
            Goal.user_id == current_user.id,
            Goal.status == GoalStatus.ACTIVE,
        )
        .first()
    )
    if not goal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found or not active"
        )

    points, completed = goal_service.apply_progress(goal, payload.value)
    current_user.total_points += points
    if completed:
        current_user.current_streak += 1
        logger.info(f"Goal completed: {goal.id} by user {current_user.id}")
    db.commit()
    db.refresh(goal)
    return GoalProgressResponse(
        goal=goal_service.to_summary(goal),
        points_awarded=points,
        message="Goal completed!" if completed else "Progress updated",
    )
