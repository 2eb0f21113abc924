from __future__ import annotations

import csv
import io
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from clerva.models.feedback import Feedback, FeedbackPriority, FeedbackStatus, FeedbackType


def _rank(column, members):
    """Order enum columns by declaration order rather than stored name."""
    return case(*[(column == member, index) for index, member in enumerate(members)], else_=len(members))


SORTABLE_FIELDS = {
    "created_at": Feedback.created_at,
    "updated_at": Feedback.updated_at,
    "priority": _rank(Feedback.priority, list(FeedbackPriority)),
    "status": _rank(Feedback.status, list(FeedbackStatus)),
}

CSV_COLUMNS = [
    "ID",
    "Type",
    "Content",
    "Rating",
    "User Name",
    "User Email",
    "Status",
    "Priority",
    "Created At",
    "Updated At",
]

TREND_WINDOW_DAYS = 30


def determine_priority(
    feedback_type: FeedbackType | str, rating: int | None, content: str
) -> FeedbackPriority:
    """Triage new feedback from its type, rating and message length."""
    feedback_type = FeedbackType(feedback_type)
    length = len(content)
    if feedback_type == FeedbackType.BUG or rating == 1:
        return FeedbackPriority.CRITICAL
    if rating == 2 or (feedback_type == FeedbackType.FEATURE and length > 200):
        return FeedbackPriority.HIGH
    if rating == 3 or length > 100:
        return FeedbackPriority.MEDIUM
    return FeedbackPriority.LOW


def feedback_title(feedback_type: FeedbackType) -> str:
    return f"{feedback_type.value.capitalize()} feedback"


def build_feedback_csv(rows: Iterable[Feedback]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for item in rows:
        user = item.user
        writer.writerow(
            [
                item.id,
                item.category.value,
                item.message,
                item.rating if item.rating is not None else "",
                user.name if user and user.name else "Anonymous",
                user.email if user else (item.email or ""),
                item.status.value,
                item.priority.value,
                item.created_at.isoformat(),
                item.updated_at.isoformat(),
            ]
        )
    return buffer.getvalue()


def export_filename(now: datetime) -> str:
    return f"feedback-export-{now:%Y-%m-%d}.csv"


def _counts_by(db: Session, column, enum_cls) -> dict[str, int]:
    counts = {member.value: 0 for member in enum_cls}
    for value, count in db.query(column, func.count(Feedback.id)).group_by(column).all():
        counts[value.value] = count
    return counts


def recent_trend(current: int, previous: int) -> str:
    if current > previous:
        return "up"
    if current < previous:
        return "down"
    return "stable"


def compute_feedback_stats(db: Session, now: datetime) -> dict:
    total = db.query(func.count(Feedback.id)).scalar() or 0
    avg_rating = db.query(func.avg(Feedback.rating)).filter(Feedback.rating.isnot(None)).scalar()

    window = timedelta(days=TREND_WINDOW_DAYS)
    current = (
        db.query(func.count(Feedback.id)).filter(Feedback.created_at >= now - window).scalar()
    )
    previous = (
        db.query(func.count(Feedback.id))
        .filter(Feedback.created_at >= now - 2 * window, Feedback.created_at < now - window)
        .scalar()
    )

    return {
        "total": total,
        "by_type": _counts_by(db, Feedback.category, FeedbackType),
        "by_status": _counts_by(db, Feedback.status, FeedbackStatus),
        "by_priority": _counts_by(db, Feedback.priority, FeedbackPriority),
        "avg_rating": round(float(avg_rating), 2) if avg_rating is not None else 0.0,
        "recent_trend": recent_trend(current or 0, previous or 0),
    }
