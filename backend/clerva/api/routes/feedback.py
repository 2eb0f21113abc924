import logging
import math
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.feedback import Feedback, FeedbackPriority, FeedbackStatus, FeedbackType
from clerva.models.user import User
from clerva.schemas.feedback import (
    FeedbackCreate,
    FeedbackCreated,
    FeedbackList,
    FeedbackPublic,
    FeedbackStats,
    FeedbackUpdate,
    FeedbackUpdated,
    Pagination,
)
from clerva.services import feedback as feedback_service
from clerva.services.notifications import FeedbackNotice, FeedbackNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_enum(enum_cls, value: str | None, label: str):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label}"
        ) from exc


def _filtered(db: Session, feedback_type: str | None, feedback_status: str | None):
    query = db.query(Feedback)
    parsed_type = _parse_enum(FeedbackType, feedback_type, "feedback type")
    parsed_status = _parse_enum(FeedbackStatus, feedback_status, "status")
    if parsed_type:
        query = query.filter(Feedback.category == parsed_type)
    if parsed_status:
        query = query.filter(Feedback.status == parsed_status)
    return query


def _get_feedback_or_404(db: Session, feedback_id: int) -> Feedback:
    item = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feedback not found")
    return item


@router.post("", response_model=FeedbackCreated, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    payload: FeedbackCreate,
    db: Session = Depends(get_db),  # noqa: B008
    session_user: User | None = Depends(deps.get_session_user),  # noqa: B008
    notifier: FeedbackNotifier = Depends(deps.get_feedback_notifier),  # noqa: B008
) -> FeedbackCreated:
    content = (payload.content or "").strip()
    if not payload.type or not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Type and content are required"
        )
    feedback_type = _parse_enum(FeedbackType, payload.type, "feedback type")

    item = Feedback(
        user_id=session_user.id if session_user else None,
        email=session_user.email if session_user else None,
        category=feedback_type,
        title=feedback_service.feedback_title(feedback_type),
        message=content,
        rating=payload.rating,
        extra=payload.metadata,
        status=FeedbackStatus.OPEN,
        priority=feedback_service.determine_priority(feedback_type, payload.rating, content),
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(f"Feedback submitted: {item.id} ({item.category.value}, {item.priority.value})")

    try:
        notifier.notify(
            FeedbackNotice(
                feedback_id=item.id,
                type=item.category.value,
                content=item.message,
                rating=item.rating,
                user_email=item.email,
                user_id=item.user_id,
            )
        )
    except Exception:
        # The row is already committed; notification is best effort
        logger.error(f"Feedback notification failed for {item.id}", exc_info=True)

    return FeedbackCreated(id=item.id)


@router.get("", response_model=FeedbackList)
def list_feedback(
    feedback_type: str | None = Query(default=None, alias="type"),  # noqa: B008
    feedback_status: str | None = Query(default=None, alias="status"),  # noqa: B008
    page: int = Query(default=1, ge=1),  # noqa: B008
    limit: int = Query(default=20, ge=1, le=100),  # noqa: B008
    sort_by: str = "created_at",
    sort_order: str = "desc",
    db: Session = Depends(get_db),  # noqa: B008
    _admin: User = Depends(deps.require_admin),  # noqa: B008
) -> FeedbackList:
    column = feedback_service.SORTABLE_FIELDS.get(sort_by)
    if column is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid sort field")
    if sort_order not in ("asc", "desc"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid sort order")

    query = _filtered(db, feedback_type, feedback_status)
    total = query.count()
    ordering = column.asc() if sort_order == "asc" else column.desc()
    items = (
        query.order_by(ordering, Feedback.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return FeedbackList(
        feedback=[FeedbackPublic.model_validate(item) for item in items],
        pagination=Pagination(
            page=page,
            limit=limit,
            total_count=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.get("/export")
def export_feedback(
    feedback_type: str | None = Query(default=None, alias="type"),  # noqa: B008
    feedback_status: str | None = Query(default=None, alias="status"),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
    admin: User = Depends(deps.require_admin),  # noqa: B008
) -> Response:
    items = (
        _filtered(db, feedback_type, feedback_status)
        .order_by(Feedback.created_at.desc())
        .all()
    )
    filename = feedback_service.export_filename(datetime.utcnow())
    logger.info(f"Feedback exported by user {admin.id}: {len(items)} rows")
    return Response(
        content=feedback_service.build_feedback_csv(items),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/stats", response_model=FeedbackStats)
def feedback_stats(
    db: Session = Depends(get_db),  # noqa: B008
    _admin: User = Depends(deps.require_admin),  # noqa: B008
) -> FeedbackStats:
    return FeedbackStats(**feedback_service.compute_feedback_stats(db, datetime.utcnow()))


@router.get("/{feedback_id}", response_model=FeedbackPublic)
def read_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    _admin: User = Depends(deps.require_admin),  # noqa: B008
) -> FeedbackPublic:
    return FeedbackPublic.model_validate(_get_feedback_or_404(db, feedback_id))


@router.patch("/{feedback_id}", response_model=FeedbackUpdated)
def update_feedback(
    feedback_id: int,
    payload: FeedbackUpdate,
    db: Session = Depends(get_db),  # noqa: B008
    admin: User = Depends(deps.require_admin),  # noqa: B008
) -> FeedbackUpdated:
    data = payload.dict(exclude_unset=True)
    new_status = _parse_enum(FeedbackStatus, data.pop("status", None), "status")
    new_priority = _parse_enum(FeedbackPriority, data.pop("priority", None), "priority")

    item = _get_feedback_or_404(db, feedback_id)
    if new_status:
        item.status = new_status
    if new_priority:
        item.priority = new_priority
    for key, value in data.items():
        setattr(item, key, value)
    db.commit()
    db.refresh(item)
    logger.info(f"Feedback {item.id} updated by user {admin.id}: {sorted(payload.dict(exclude_unset=True))}")
    return FeedbackUpdated(feedback=FeedbackPublic.model_validate(item))
