import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.study_session import (
    OPEN_STATUSES,
    SessionParticipant,
    SessionStatus,
    StudySession,
)
from clerva.models.subject import Subject
from clerva.models.user import User
from clerva.schemas.session import (
    CancelSessionResponse,
    JoinedSession,
    JoinSessionResponse,
    StudySessionCreate,
    StudySessionPublic,
)
from clerva.services.timefmt import to_naive_utc, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

JOIN_WINDOW = timedelta(minutes=15)


@router.post("", response_model=StudySessionPublic, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: StudySessionCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> StudySessionPublic:
    if payload.subject_id is not None:
        if not db.query(Subject).filter(Subject.id == payload.subject_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    session = StudySession(
        creator_id=current_user.id,
        subject_id=payload.subject_id,
        title=payload.title.strip(),
        start_time=to_naive_utc(payload.start_time),
        end_time=to_naive_utc(payload.end_time),
        location=payload.location,
        is_virtual=payload.is_virtual,
    )
    session.participants.append(SessionParticipant(user_id=current_user.id))
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info(f"StudySession created: {session.id}")
    return session


@router.post("/{session_id}/join", response_model=JoinSessionResponse)
def join_session(
    session_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> JoinSessionResponse:
    session = (
        db.query(StudySession)
        .filter(StudySession.id == session_id, StudySession.status.in_(OPEN_STATUSES))
        .first()
    )
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found or not available"
        )

    now = utc_now()
    if session.start_time - now > JOIN_WINDOW:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session has not started yet. You can join 15 minutes before the start time.",
        )

    if not any(p.user_id == current_user.id for p in session.participants):
        session.participants.append(SessionParticipant(user_id=current_user.id))
    if session.status == SessionStatus.SCHEDULED and session.start_time <= now:
        session.status = SessionStatus.IN_PROGRESS
    db.commit()
    db.refresh(session)

    return JoinSessionResponse(
        success=True,
        message="Joined session successfully",
        session=JoinedSession(
            id=session.id,
            name=session.title,
            location=session.location,
            participants=len(session.participants),
            status=session.status,
        ),
    )


@router.post("/{session_id}/cancel", response_model=CancelSessionResponse)
def cancel_session(
    session_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> CancelSessionResponse:
    participation = (
        db.query(SessionParticipant)
        .join(StudySession)
        .filter(
            SessionParticipant.session_id == session_id,
            SessionParticipant.user_id == current_user.id,
            StudySession.status.in_(OPEN_STATUSES),
        )
        .first()
    )
    if not participation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found or you are not a participant",
        )

    session = participation.session
    others = [p for p in session.participants if p.user_id != current_user.id]
    if others:
        # Someone else is still attending, so only this user leaves
        db.delete(participation)
        message = "You have left the session"
    else:
        session.status = SessionStatus.CANCELLED
        message = "Session cancelled successfully"
    db.commit()

    if others:
        logger.info(
            f"Session {session_id}: user {current_user.id} left, notifying {len(others)} participants"
        )
    return CancelSessionResponse(
        success=True, message=message, notified_participants=len(others)
    )
