from pydantic import BaseModel

from clerva.schemas.user import AdminUserPublic


class UserCounts(BaseModel):
    total_users: int
    active_users: int
    new_users_today: int


class AdminUserList(BaseModel):
    users: list[AdminUserPublic]
    stats: UserCounts


class UserStats(UserCounts):
    new_users_this_week: int
    average_session_hours: float


class UserTotals(BaseModel):
    total: int
    active: int
    new_this_week: int


class ContentTotals(BaseModel):
    subjects: int
    goals: int
    completed_goals: int
    study_sessions: int
    completed_sessions: int


class FeedbackTotals(BaseModel):
    total: int
    open: int
    critical: int


class DashboardOverview(BaseModel):
    users: UserTotals
    content: ContentTotals
    feedback: FeedbackTotals
