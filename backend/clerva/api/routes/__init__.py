from fastapi import APIRouter

from clerva.api.routes import (
    admin,
    ai,
    auth,
    calendar,
    dashboard,
    feedback,
    goals,
    health,
    privacy,
    sessions,
    study_groups,
    subjects,
    users,
)


api_router = APIRouter(prefix="/api")
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/user", tags=["user"])
api_router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
api_router.include_router(goals.router, prefix="/goals", tags=["goals"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["feedback"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
api_router.include_router(privacy.router, prefix="/privacy", tags=["privacy"])
api_router.include_router(study_groups.router, prefix="/study-groups", tags=["study-groups"])
api_router.include_router(calendar.router, prefix="/calendar/events", tags=["calendar"])
