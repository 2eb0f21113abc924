from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.subject import Subject, UserSubject
from clerva.models.user import User
from clerva.schemas.subject import (
    CategoryCount,
    SubjectCatalog,
    SubjectPublic,
    UserSubjectCreate,
    UserSubjectList,
    UserSubjectPublic,
    UserSubjectResponse,
)

router = APIRouter()

MAX_ACTIVE_SUBJECTS = 15
SUBJECT_POINTS = 10


def _to_public(link: UserSubject) -> UserSubjectPublic:
    return UserSubjectPublic(
        id=link.subject.id,
        name=link.subject.name,
        category=link.subject.category,
        description=link.subject.description,
        skill_level=link.skill_level,
        is_active=link.is_active,
        added_at=link.created_at,
    )


def _active_count(db: Session, user: User) -> int:
    return (
        db.query(UserSubject)
        .filter(UserSubject.user_id == user.id, UserSubject.is_active.is_(True))
        .count()
    )


def _check_subject_limit(db: Session, user: User) -> None:
    if _active_count(db, user) >= MAX_ACTIVE_SUBJECTS:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can study at most {MAX_ACTIVE_SUBJECTS} subjects at once",
        )


@router.get("", response_model=SubjectCatalog | UserSubjectList)
def list_subjects(
    category: str | None = None,
    user_subjects: bool = False,
    db: Session = Depends(get_db),  # noqa: B008
    session_user: User | None = Depends(deps.get_session_user),  # noqa: B008
) -> SubjectCatalog | UserSubjectList:
    if user_subjects:
        if session_user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        links = (
            db.query(UserSubject)
            .join(Subject)
            .filter(UserSubject.user_id == session_user.id, UserSubject.is_active.is_(True))
            .order_by(Subject.name)
            .all()
        )
        return UserSubjectList(subjects=[_to_public(link) for link in links])

    learners = (
        db.query(UserSubject.subject_id, func.count(UserSubject.id).label("learners"))
        .filter(UserSubject.is_active.is_(True))
        .group_by(UserSubject.subject_id)
        .subquery()
    )
    query = db.query(Subject, func.coalesce(learners.c.learners, 0)).outerjoin(
        learners, learners.c.subject_id == Subject.id
    )
    if category:
        query = query.filter(Subject.category == category)
    rows = query.order_by(Subject.category, Subject.name).all()

    categories = (
        db.query(Subject.category, func.count(Subject.id))
        .group_by(Subject.category)
        .order_by(Subject.category)
        .all()
    )
    return SubjectCatalog(
        subjects=[
            SubjectPublic(
                id=subject.id,
                name=subject.name,
                category=subject.category,
                description=subject.description,
                user_count=count,
                created_at=subject.created_at,
            )
            for subject, count in rows
        ],
        categories=[CategoryCount(name=name, count=count) for name, count in categories],
        total_subjects=len(rows),
    )


@router.post("", response_model=UserSubjectResponse, status_code=status.HTTP_201_CREATED)
def add_subject(
    payload: UserSubjectCreate,
    response: Response,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> UserSubjectResponse:
    subject = db.query(Subject).filter(Subject.id == payload.subject_id).first()
    if not subject:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")

    link = (
        db.query(UserSubject)
        .filter(UserSubject.user_id == current_user.id, UserSubject.subject_id == subject.id)
        .first()
    )
    if link and link.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Subject already added"
        )
    _check_subject_limit(db, current_user)

    if link:
        link.is_active = True
        link.skill_level = payload.skill_level
        message = "Subject reactivated successfully"
        response.status_code = status.HTTP_200_OK
    else:
        link = UserSubject(
            user_id=current_user.id,
            subject_id=subject.id,
            skill_level=payload.skill_level,
        )
        db.add(link)
        message = "Subject added successfully"
    current_user.total_points += SUBJECT_POINTS
    db.commit()
    db.refresh(link)
    return UserSubjectResponse(user_subject=_to_public(link), message=message)


@router.delete("")
def remove_subject(
    subject_id: int | None = None,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> dict[str, str]:
    if subject_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Subject ID is required"
        )
    link = (
        db.query(UserSubject)
        .filter(
            UserSubject.user_id == current_user.id,
            UserSubject.subject_id == subject_id,
            UserSubject.is_active.is_(True),
        )
        .first()
    )
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found in your list"
        )
    # Keep the row so history and points survive
    link.is_active = False
    link.last_studied = datetime.utcnow()
    db.commit()
    return {"message": "Subject removed successfully"}
