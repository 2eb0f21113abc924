from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from clerva.models.feedback import FeedbackPriority, FeedbackStatus, FeedbackType


class FeedbackCreate(BaseModel):
    # Kept loose so missing/unknown values get the handler's own 400 messages
    type: str | None = None
    content: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    metadata: dict[str, Any] | None = None


class FeedbackCreated(BaseModel):
    success: bool = True
    message: str = "Feedback submitted successfully"
    id: int


class FeedbackUser(BaseModel):
    id: int
    name: str | None
    email: str
    image: str | None = None

    class Config:
        from_attributes = True


class FeedbackPublic(BaseModel):
    id: int
    category: FeedbackType
    title: str
    message: str
    rating: int | None
    email: str | None
    status: FeedbackStatus
    priority: FeedbackPriority
    admin_notes: str | None
    assigned_to: str | None
    resolution: str | None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="extra")
    user: FeedbackUser | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total_count: int
    total_pages: int


class FeedbackList(BaseModel):
    feedback: list[FeedbackPublic]
    pagination: Pagination


class FeedbackUpdate(BaseModel):
    status: str | None = None
    priority: str | None = None
    admin_notes: str | None = None
    assigned_to: str | None = None
    resolution: str | None = None


class FeedbackUpdated(BaseModel):
    success: bool = True
    feedback: FeedbackPublic


class FeedbackStats(BaseModel):
    total: int
    by_type: dict[str, int]
    by_status: dict[str, int]
    by_priority: dict[str, int]
    avg_rating: float
    recent_trend: str
