from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, validator

from clerva.schemas.auth import check_password_strength
from clerva.schemas.goal import GoalSummary


LearningStyle = Literal["visual", "auditory", "kinesthetic", "reading"]


class ProfilePublic(BaseModel):
    id: int
    name: str | None
    email: EmailStr
    image: str | None = None
    bio: str | None = None
    timezone: str
    learning_style: str | None = None
    total_points: int
    current_streak: int
    preferences: dict[str, Any] = Field(default_factory=dict)
    availability: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=500)
    timezone: str | None = None
    learning_style: LearningStyle | None = None
    preferences: dict[str, Any] | None = None
    availability: dict[str, Any] | None = None

    @validator("name", pre=True)
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProfileSubject(BaseModel):
    id: int
    name: str
    category: str
    skill_level: str
    last_studied: datetime | None = None


class ProfileAchievement(BaseModel):
    id: int
    name: str
    description: str | None = None
    category: str
    points: int
    earned_at: datetime


class ProfileStats(BaseModel):
    total_study_sessions: int
    active_goals: int
    achievements: int


class ProfileResponse(BaseModel):
    profile: ProfilePublic
    subjects: list[ProfileSubject]
    achievements: list[ProfileAchievement]
    goals: list[GoalSummary]
    stats: ProfileStats


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)

    @validator("new_password")
    def validate_password_strength(cls, v):
        return check_password_strength(v)


class AdminUserPublic(BaseModel):
    id: int
    name: str | None
    email: EmailStr
    image: str | None = None
    total_points: int
    current_streak: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OnboardingData(BaseModel):
    study_style: LearningStyle | None = None
    subjects: list[str] = Field(default_factory=list)
    age_group: str | None = None
    grade_level: str | None = None
    study_goals: list[str] = Field(default_factory=list)
    preferred_time: str | None = None
    session_duration: int | None = Field(default=None, ge=15, le=480)
    study_environment: str | None = None

    @validator("subjects", "study_goals")
    def drop_blank(cls, v):
        return [item.strip() for item in v if item and item.strip()]


class OnboardingRequest(BaseModel):
    completed: bool = True
    skipped: bool = False
    data: OnboardingData | None = None


class OnboardingProfile(BaseModel):
    learning_style: str | None = None
    subjects: list[str] = Field(default_factory=list)
    age_group: str | None = None
    grade_level: str | None = None
    study_goals: list[str] = Field(default_factory=list)


class OnboardingStatus(BaseModel):
    completed: bool
    data: OnboardingData | None = None
    user_profile: OnboardingProfile


class SettingsSectionUpdate(BaseModel):
    section: str = Field(min_length=1, max_length=50)
    settings: dict[str, Any]


class SettingsResponse(BaseModel):
    message: str
    settings: dict[str, Any]
