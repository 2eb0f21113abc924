import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.core.config import get_settings
from clerva.core.security import get_password_hash, verify_password
from clerva.db.session import get_db
from clerva.models.goal import Goal, GoalStatus
from clerva.models.study_session import SessionParticipant
from clerva.models.user import User
from clerva.schemas.user import (
    ChangePasswordRequest,
    OnboardingData,
    OnboardingProfile,
    OnboardingRequest,
    OnboardingStatus,
    ProfileAchievement,
    ProfilePublic,
    ProfileResponse,
    ProfileStats,
    ProfileSubject,
    ProfileUpdate,
    SettingsResponse,
    SettingsSectionUpdate,
)
from clerva.services.goals import to_summary
from clerva.services.settings import (
    ProtectedSectionError,
    apply_onboarding,
    merge_preferences,
    merge_section,
)
from clerva.services.timefmt import is_valid_timezone

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> ProfileResponse:
    subjects = [
        ProfileSubject(
            id=link.subject.id,
            name=link.subject.name,
            category=link.subject.category,
            skill_level=link.skill_level.value,
            last_studied=link.last_studied,
        )
        for link in current_user.user_subjects
        if link.is_active
    ]
    achievements = [
        ProfileAchievement(
            id=earned.achievement.id,
            name=earned.achievement.name,
            description=earned.achievement.description,
            category=earned.achievement.category,
            points=earned.achievement.points,
            earned_at=earned.unlocked_at,
        )
        for earned in sorted(
            current_user.user_achievements, key=lambda item: item.unlocked_at, reverse=True
        )
    ]
    active_goals = (
        db.query(Goal)
        .filter(Goal.user_id == current_user.id, Goal.status == GoalStatus.ACTIVE)
        .order_by(Goal.created_at.desc())
        .all()
    )
    session_count = (
        db.query(SessionParticipant)
        .filter(SessionParticipant.user_id == current_user.id)
        .count()
    )
    return ProfileResponse(
        profile=ProfilePublic.model_validate(current_user),
        subjects=subjects,
        achievements=achievements,
        goals=[to_summary(goal) for goal in active_goals],
        stats=ProfileStats(
            total_study_sessions=session_count,
            active_goals=len(active_goals),
            achievements=len(achievements),
        ),
    )


@router.patch("/profile", response_model=ProfilePublic)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> ProfilePublic:
    data = payload.dict(exclude_unset=True)
    if data.get("timezone") is not None and not is_valid_timezone(data["timezone"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid timezone"
        )
    incoming_preferences = data.pop("preferences", None)
    for key, value in data.items():
        if value is None and key in {"timezone", "availability"}:
            continue
        setattr(current_user, key, value)
    if incoming_preferences:
        # Privacy settings only change through the privacy endpoint
        merge_preferences(current_user, incoming_preferences)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> dict[str, str]:
    if not current_user.hashed_password or not verify_password(
        payload.current_password, current_user.hashed_password
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    current_user.hashed_password = get_password_hash(payload.new_password)
    db.add(current_user)
    db.commit()
    return {"message": "Password changed successfully"}


@router.delete("/delete-account")
def delete_account(
    response: Response,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> dict[str, str]:
    user_id = current_user.id
    db.delete(current_user)
    db.commit()
    response.delete_cookie(get_settings().session_cookie_name)
    logger.info(f"User account deleted: {user_id}")
    return {"message": "Account deleted successfully"}


@router.get("/onboarding", response_model=OnboardingStatus)
def read_onboarding(
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> OnboardingStatus:
    preferences = current_user.preferences or {}
    data = None
    stored = preferences.get("onboarding")
    if isinstance(stored, dict):
        try:
            data = OnboardingData(**stored)
        except ValidationError:
            logger.warning(f"Stored onboarding answers for user {current_user.id} are invalid")
    return OnboardingStatus(
        completed=current_user.profile_complete,
        data=data,
        user_profile=OnboardingProfile(
            learning_style=current_user.learning_style,
            subjects=data.subjects if data else [],
            age_group=data.age_group if data else None,
            grade_level=data.grade_level if data else None,
            study_goals=data.study_goals if data else [],
        ),
    )


@router.post("/onboarding")
def save_onboarding(
    payload: OnboardingRequest,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> dict[str, object]:
    apply_onboarding(current_user, payload.completed, payload.skipped, payload.data)
    db.add(current_user)
    db.commit()
    logger.info(
        f"User onboarding saved: {current_user.id} (completed={payload.completed}, skipped={payload.skipped})"
    )
    return {
        "success": True,
        "message": "Onboarding skipped" if payload.skipped else "Onboarding completed successfully",
    }


@router.get("/settings")
def read_settings(
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> dict:
    return current_user.preferences or {}


@router.put("/settings", response_model=SettingsResponse)
def replace_settings(
    payload: dict,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> SettingsResponse:
    settings = merge_preferences(current_user, payload, stamp=datetime.utcnow())
    db.add(current_user)
    db.commit()
    return SettingsResponse(message="Settings updated successfully", settings=settings)


@router.patch("/settings", response_model=SettingsResponse)
def update_settings_section(
    payload: SettingsSectionUpdate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> SettingsResponse:
    try:
        settings = merge_section(current_user, payload.section, payload.settings, datetime.utcnow())
    except ProtectedSectionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    db.add(current_user)
    db.commit()
    return SettingsResponse(message="Settings section updated successfully", settings=settings)
