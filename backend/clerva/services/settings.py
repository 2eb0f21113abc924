"""User preference storage shared by profile, settings and onboarding."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from clerva.models.user import User
from clerva.schemas.user import OnboardingData
from clerva.services.privacy import PRIVACY_KEY

DEFAULT_SESSION_MINUTES = 60
WORKDAY = {"available": True, "start": "09:00", "end": "17:00"}
WEEKEND = {"available": True, "start": "10:00", "end": "16:00"}
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


class ProtectedSectionError(ValueError):
    pass


def merge_preferences(user: User, incoming: dict[str, Any], stamp: datetime | None = None) -> dict[str, Any]:
    """Shallow-merge top-level keys; the privacy section is left untouched."""
    preferences = dict(user.preferences or {})
    preferences.update({key: value for key, value in incoming.items() if key != PRIVACY_KEY})
    if stamp is not None:
        preferences["updated_at"] = stamp.isoformat()
    user.preferences = preferences
    return preferences


def merge_section(user: User, section: str, values: dict[str, Any], stamp: datetime) -> dict[str, Any]:
    if section == PRIVACY_KEY:
        raise ProtectedSectionError("Privacy settings are managed through the privacy endpoint")
    preferences = dict(user.preferences or {})
    current = preferences.get(section)
    merged = dict(current) if isinstance(current, dict) else {}
    merged.update(values)
    preferences[section] = merged
    preferences["updated_at"] = stamp.isoformat()
    user.preferences = preferences
    return preferences


def study_preferences(data: OnboardingData) -> dict[str, Any]:
    """Expand onboarding answers into the ``study`` preferences section."""
    duration = data.session_duration or DEFAULT_SESSION_MINUTES
    goals = set(data.study_goals)
    return {
        "learning_style": data.study_style,
        "preferred_time": data.preferred_time or "morning",
        "session_duration": duration,
        "study_environment": data.study_environment or "quiet",
        "subjects": [{"name": name, "level": "intermediate"} for name in data.subjects],
        "study_goals": {
            "daily_study_time": duration,
            "weekly_sessions": 5,
            "focus_improvement": "focus_improvement" in goals,
            "skill_development": "skill_development" in goals,
            "exam_preparation": "exam_prep" in goals,
            "collaborative_learning": "collaborative_learning" in goals,
        },
        "availability": {
            day: dict(WORKDAY if day in WEEKDAYS else WEEKEND)
            for day in (*WEEKDAYS, "saturday", "sunday")
        },
        "group_size_preference": "small",
        "break_frequency": 25,
    }


def apply_onboarding(user: User, completed: bool, skipped: bool, data: OnboardingData | None) -> None:
    user.profile_complete = completed
    if skipped or data is None:
        return
    if data.study_style:
        user.learning_style = data.study_style
    merge_preferences(
        user,
        {
            "study": study_preferences(data),
            "onboarding_completed": True,
            "onboarding": data.dict(),
        },
    )
