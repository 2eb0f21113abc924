from datetime import datetime

from pydantic import BaseModel, Field, validator

from clerva.models.study_session import SessionStatus


class StudySessionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    subject_id: int | None = None
    start_time: datetime
    end_time: datetime
    location: str | None = Field(default=None, max_length=255)
    is_virtual: bool = False

    @validator("end_time")
    def end_after_start(cls, v, values):
        start = values.get("start_time")
        if start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v


class StudySessionPublic(BaseModel):
    id: int
    creator_id: int
    subject_id: int | None
    title: str
    start_time: datetime
    end_time: datetime
    location: str | None
    is_virtual: bool
    status: SessionStatus

    class Config:
        from_attributes = True


class UpcomingSession(BaseModel):
    id: int
    title: str
    subject: str
    time: str
    duration: str
    location: str
    participants: int
    type: str
    status: SessionStatus


class JoinedSession(BaseModel):
    id: int
    name: str
    location: str | None
    participants: int
    status: SessionStatus


class JoinSessionResponse(BaseModel):
    success: bool
    message: str
    session: JoinedSession


class CancelSessionResponse(BaseModel):
    success: bool
    message: str
    notified_participants: int = 0


class DashboardStats(BaseModel):
    upcoming_sessions: int
    completed_sessions: int
    active_goals: int
    completed_goals: int
    total_points: int
    current_streak: int
    study_hours: float
    study_score: int
