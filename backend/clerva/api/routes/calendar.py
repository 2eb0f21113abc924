import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.calendar_event import CalendarEvent
from clerva.models.goal import Goal
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.models.user import User
from clerva.schemas.calendar import (
    CalendarDeleteResponse,
    CalendarEventCreate,
    CalendarEventResponse,
    CalendarEventUpdate,
    CalendarItem,
)
from clerva.services import calendar as calendar_service
from clerva.services.timefmt import to_naive_utc

logger = logging.getLogger(__name__)

router = APIRouter()

END_BEFORE_START = "End time must be after start time"


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _parse(item_id: str) -> tuple[str, int]:
    try:
        return calendar_service.parse_item_id(item_id)
    except ValueError as exc:
        raise _bad_request("Invalid event type") from exc


def _owned_event(db: Session, user: User, event_id: int) -> CalendarEvent:
    event = (
        db.query(CalendarEvent)
        .filter(CalendarEvent.id == event_id, CalendarEvent.user_id == user.id)
        .first()
    )
    if not event:
        raise _not_found("Event not found or access denied")
    return event


def _joined_session(db: Session, user: User, session_id: int) -> StudySession:
    session = (
        db.query(StudySession)
        .join(SessionParticipant, SessionParticipant.session_id == StudySession.id)
        .filter(StudySession.id == session_id, SessionParticipant.user_id == user.id)
        .first()
    )
    if not session:
        raise _not_found("Study session not found or access denied")
    return session


def _owned_goal(db: Session, user: User, goal_id: int) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user.id).first()
    if not goal:
        raise _not_found("Goal not found or access denied")
    return goal


@router.get("", response_model=list[CalendarItem])
def list_events(
    start: datetime | None = None,
    end: datetime | None = None,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> list[CalendarItem]:
    return calendar_service.collect_calendar(
        db,
        current_user,
        to_naive_utc(start) if start else None,
        to_naive_utc(end) if end else None,
    )


@router.post("", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: CalendarEventCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> CalendarEventResponse:
    start, end = to_naive_utc(payload.start_time), to_naive_utc(payload.end_time)
    if end <= start:
        raise _bad_request(END_BEFORE_START)
    event = CalendarEvent(
        user_id=current_user.id,
        title=payload.title,
        description=payload.description,
        start_time=start,
        end_time=end,
        event_type=payload.type,
        location=payload.location,
        is_all_day=payload.is_all_day,
        color=payload.color,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return CalendarEventResponse(success=True, event=calendar_service.event_item(event))


@router.put("/{item_id}", response_model=CalendarEventResponse)
def update_event(
    item_id: str,
    payload: CalendarEventUpdate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> CalendarEventResponse:
    source, row_id = _parse(item_id)
    changes = payload.dict(exclude_unset=True, exclude_none=True)
    for key in ("start_time", "end_time"):
        if key in changes:
            changes[key] = to_naive_utc(changes[key])

    if source == calendar_service.EVENT_SOURCE:
        event = _owned_event(db, current_user, row_id)
        if "type" in changes:
            changes["event_type"] = changes.pop("type")
        start = changes.get("start_time", event.start_time)
        end = changes.get("end_time", event.end_time)
        if end <= start:
            raise _bad_request(END_BEFORE_START)
        for key, value in changes.items():
            setattr(event, key, value)
        db.commit()
        db.refresh(event)
        item = calendar_service.event_item(event)

    elif source == calendar_service.SESSION_SOURCE:
        session = _joined_session(db, current_user, row_id)
        start = changes.get("start_time", session.start_time)
        end = changes.get("end_time", session.end_time)
        if end <= start:
            raise _bad_request(END_BEFORE_START)
        # Only scheduling fields are editable from the calendar
        session.start_time = start
        session.end_time = end
        if "location" in changes:
            session.location = changes["location"]
        db.commit()
        db.refresh(session)
        item = calendar_service.session_item(session)

    else:
        goal = _owned_goal(db, current_user, row_id)
        if "start_time" not in changes:
            raise _bad_request("A new deadline is required to move a goal")
        goal.deadline = changes["start_time"]
        if "title" in changes:
            goal.title = changes["title"]
        if "description" in changes:
            goal.description = changes["description"]
        db.commit()
        db.refresh(goal)
        item = calendar_service.goal_item(goal)

    return CalendarEventResponse(success=True, event=item)


@router.delete("/{item_id}", response_model=CalendarDeleteResponse)
def delete_event(
    item_id: str,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> CalendarDeleteResponse:
    source, row_id = _parse(item_id)

    if source == calendar_service.EVENT_SOURCE:
        db.delete(_owned_event(db, current_user, row_id))
        message = "Event deleted successfully"
    elif source == calendar_service.SESSION_SOURCE:
        session = _joined_session(db, current_user, row_id)
        if session.creator_id == current_user.id:
            session.status = SessionStatus.CANCELLED
            message = "Session cancelled successfully"
        else:
            participation = next(
                p for p in session.participants if p.user_id == current_user.id
            )
            session.participants.remove(participation)
            message = "You have left the session"
    else:
        db.delete(_owned_goal(db, current_user, row_id))
        message = "Event deleted successfully"

    db.commit()
    logger.info(f"Calendar item {item_id} removed by user {current_user.id}")
    return CalendarDeleteResponse(success=True, message=message)
