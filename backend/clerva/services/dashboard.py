from __future__ import annotations


def study_score(
    upcoming_sessions: int,
    completed_sessions: int,
    completed_goals: int,
    current_streak: int,
) -> int:
    """Blend activity counters into a 0..100 score."""
    base = min(100, completed_sessions * 10 + upcoming_sessions * 5)
    goal_bonus = min(15, completed_goals * 3)
    streak_bonus = min(10, current_streak * 2)
    return max(0, min(100, base + goal_bonus + streak_bonus))
