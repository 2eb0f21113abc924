"""Merge personal events, study sessions and goal deadlines into one calendar."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from clerva.models.calendar_event import CalendarEvent, EventType
from clerva.models.goal import Goal
from clerva.models.study_session import SessionParticipant, StudySession
from clerva.models.user import User
from clerva.schemas.calendar import CalendarItem

EVENT_SOURCE = "event"
SESSION_SOURCE = "session"
GOAL_SOURCE = "goal"
SOURCES = (EVENT_SOURCE, SESSION_SOURCE, GOAL_SOURCE)

EVENT_COLORS = {
    EventType.STUDY_SESSION: "#3B82F6",
    EventType.GROUP_STUDY: "#10B981",
    EventType.EXAM: "#EF4444",
    EventType.ASSIGNMENT: "#F59E0B",
    EventType.MEETING: "#8B5CF6",
    EventType.REMINDER: "#EC4899",
}


def parse_item_id(item_id: str) -> tuple[str, int]:
    """Split ``session-12`` into its source and row id."""
    source, _, raw_id = item_id.partition("-")
    if source not in SOURCES or not raw_id.isdigit():
        raise ValueError(f"Unknown calendar item: {item_id}")
    return source, int(raw_id)


def event_item(event: CalendarEvent) -> CalendarItem:
    return CalendarItem(
        id=f"{EVENT_SOURCE}-{event.id}",
        title=event.title,
        description=event.description,
        start_time=event.start_time,
        end_time=event.end_time,
        type=event.event_type.value,
        color=event.color or EVENT_COLORS[event.event_type],
        location=event.location,
        is_all_day=event.is_all_day,
        source="personal",
    )


def session_item(session: StudySession) -> CalendarItem:
    return CalendarItem(
        id=f"{SESSION_SOURCE}-{session.id}",
        title=session.title or "Study Session",
        start_time=session.start_time,
        end_time=session.end_time,
        type=EventType.STUDY_SESSION.value,
        color=EVENT_COLORS[EventType.STUDY_SESSION],
        location=session.location,
        source="study_session",
        participants=[p.user.name or p.user.email for p in session.participants],
    )


def goal_item(goal: Goal) -> CalendarItem:
    return CalendarItem(
        id=f"{GOAL_SOURCE}-{goal.id}",
        title=f"Goal: {goal.title}",
        description=goal.description,
        start_time=goal.deadline,
        end_time=goal.deadline,
        type=EventType.ASSIGNMENT.value,
        color=EVENT_COLORS[EventType.ASSIGNMENT],
        is_all_day=True,
        source="goal",
    )


def collect_calendar(
    db: Session, user: User, start: datetime | None = None, end: datetime | None = None
) -> list[CalendarItem]:
    events = db.query(CalendarEvent).filter(CalendarEvent.user_id == user.id)
    sessions = (
        db.query(StudySession)
        .join(SessionParticipant, SessionParticipant.session_id == StudySession.id)
        .filter(SessionParticipant.user_id == user.id)
    )
    goals = db.query(Goal).filter(Goal.user_id == user.id, Goal.deadline.isnot(None))

    # The range only applies when both ends are given
    if start is not None and end is not None:
        events = events.filter(CalendarEvent.start_time.between(start, end))
        sessions = sessions.filter(StudySession.start_time.between(start, end))
        goals = goals.filter(Goal.deadline.between(start, end))

    items = (
        [event_item(event) for event in events.all()]
        + [session_item(session) for session in sessions.all()]
        + [goal_item(goal) for goal in goals.all()]
    )
    items.sort(key=lambda item: item.start_time)
    return items
