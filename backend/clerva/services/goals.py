from __future__ import annotations

import math
from datetime import datetime

from clerva.models.goal import Goal, GoalStatus
from clerva.schemas.goal import GoalPublic, GoalSummary

CREATE_POINTS = 15
PROGRESS_POINTS = 5
MAX_COMPLETION_BONUS = 100
MAX_ACTIVE_GOALS = 20


def goal_progress(goal: Goal) -> float:
    """Percent towards the target, clamped to 0..100."""
    if not goal.target_value:
        return 0.0
    percent = goal.current_value / goal.target_value * 100
    return round(max(0.0, min(100.0, percent)), 1)


def is_overdue(goal: Goal, now: datetime) -> bool:
    return (
        goal.deadline is not None
        and goal.status == GoalStatus.ACTIVE
        and goal.deadline < now
    )


def days_left(goal: Goal, now: datetime) -> int | None:
    if goal.deadline is None:
        return None
    return math.ceil((goal.deadline - now).total_seconds() / 86400)


def completion_bonus(target: float) -> int:
    return int(min(target * 2, MAX_COMPLETION_BONUS))


def to_summary(goal: Goal) -> GoalSummary:
    return GoalSummary(
        id=goal.id,
        title=goal.title,
        description=goal.description,
        target_value=goal.target_value,
        current_value=goal.current_value,
        progress=goal_progress(goal),
        deadline=goal.deadline,
        status=goal.status,
    )


def to_public(goal: Goal, now: datetime) -> GoalPublic:
    return GoalPublic(
        **to_summary(goal).dict(),
        unit=goal.unit,
        category=goal.category,
        is_public=goal.is_public,
        is_overdue=is_overdue(goal, now),
        days_left=days_left(goal, now),
        created_at=goal.created_at,
        updated_at=goal.updated_at,
    )


def apply_progress(goal: Goal, value: float) -> tuple[int, bool]:
    """Record a new current value.

    Returns the points earned and whether this update completed the goal.
    """
    goal.current_value = value
    points = PROGRESS_POINTS
    completed = value >= goal.target_value
    if completed:
        goal.status = GoalStatus.COMPLETED
        points += completion_bonus(goal.target_value)
    return points, completed
