from datetime import datetime

from pydantic import BaseModel, Field

from clerva.models.goal import GoalCategory, GoalStatus


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    target: float = Field(gt=0)
    unit: str = Field(max_length=50)
    category: GoalCategory = GoalCategory.CUSTOM
    deadline: datetime | None = None
    is_public: bool = False


class GoalProgressUpdate(BaseModel):
    value: float = Field(ge=0)
    note: str | None = Field(default=None, max_length=300)


class GoalSummary(BaseModel):
    id: int
    title: str
    description: str | None = None
    target_value: float
    current_value: float
    progress: float
    deadline: datetime | None = None
    status: GoalStatus


class GoalPublic(GoalSummary):
    unit: str | None = None
    category: GoalCategory
    is_public: bool
    is_overdue: bool
    days_left: int | None = None
    created_at: datetime
    updated_at: datetime


class GoalStats(BaseModel):
    total: int
    active: int
    completed: int
    overdue: int
    completion_rate: float


class GoalFilters(BaseModel):
    status: GoalStatus | None = None
    category: GoalCategory | None = None


class GoalList(BaseModel):
    goals: list[GoalPublic]
    stats: GoalStats
    filters: GoalFilters


class GoalResponse(BaseModel):
    goal: GoalPublic
    message: str


class GoalProgressResponse(BaseModel):
    goal: GoalSummary
    points_awarded: int
    message: str
