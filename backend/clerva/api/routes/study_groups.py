import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import String, cast, or_, select
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.study_group import MANAGING_ROLES, GroupRole, StudyGroup, StudyGroupMember
from clerva.models.subject import Subject
from clerva.models.user import User
from clerva.schemas.study_group import (
    GroupFilters,
    GroupMemberPublic,
    GroupMembershipResponse,
    GroupPagination,
    GroupSubject,
    JoinGroupRequest,
    StudyGroupCreate,
    StudyGroupCreated,
    StudyGroupList,
    StudyGroupPublic,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CREATE_POINTS = 25
JOIN_POINTS = 10
MAX_MANAGED_GROUPS = 5
MAX_PAGE_SIZE = 50


def _to_public(group: StudyGroup, user_id: int) -> StudyGroupPublic:
    membership = next((m for m in group.members if m.user_id == user_id), None)
    return StudyGroupPublic(
        id=group.id,
        name=group.name,
        description=group.description,
        subject=GroupSubject.model_validate(group.subject) if group.subject else None,
        max_members=group.max_members,
        current_members=len(group.members),
        is_private=group.is_private,
        location=group.location,
        timezone=group.timezone,
        schedule=group.schedule,
        tags=group.tags or [],
        created_at=group.created_at,
        updated_at=group.updated_at,
        members=[
            GroupMemberPublic(
                id=member.user.id,
                name=member.user.name,
                image=member.user.image,
                role=member.role,
                joined_at=member.joined_at,
            )
            for member in group.members
        ],
        can_join=membership is None and len(group.members) < group.max_members,
        is_member=membership is not None,
        is_owner=membership is not None and membership.role == GroupRole.OWNER,
    )


@router.get("", response_model=StudyGroupList)
def list_groups(
    page: int = Query(default=1, ge=1),  # noqa: B008
    limit: int = Query(default=20, ge=1),  # noqa: B008
    subject_id: int | None = None,
    search: str | None = None,
    my_groups: bool = False,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> StudyGroupList:
    limit = min(limit, MAX_PAGE_SIZE)
    member_of = select(StudyGroupMember.group_id).where(
        StudyGroupMember.user_id == current_user.id
    )

    query = db.query(StudyGroup)
    if my_groups:
        query = query.filter(StudyGroup.id.in_(member_of))
    else:
        # Private groups are only listed for their members
        query = query.filter(or_(StudyGroup.is_private.is_(False), StudyGroup.id.in_(member_of)))
    if subject_id is not None:
        query = query.filter(StudyGroup.subject_id == subject_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                StudyGroup.name.ilike(pattern),
                StudyGroup.description.ilike(pattern),
                cast(StudyGroup.tags, String).ilike(pattern),
            )
        )

    total = query.count()
    groups = (
        query.order_by(StudyGroup.created_at.desc(), StudyGroup.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return StudyGroupList(
        groups=[_to_public(group, current_user.id) for group in groups],
        pagination=GroupPagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
            has_more=page * limit < total,
        ),
        filters=GroupFilters(subject_id=subject_id, search=search, my_groups=my_groups),
    )


@router.post("", response_model=StudyGroupCreated, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: StudyGroupCreate,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> StudyGroupCreated:
    managed = (
        db.query(StudyGroupMember)
        .filter(
            StudyGroupMember.user_id == current_user.id,
            StudyGroupMember.role.in_(MANAGING_ROLES),
        )
        .count()
    )
    if managed >= MAX_MANAGED_GROUPS:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only create/admin up to {MAX_MANAGED_GROUPS} study groups",
        )
    if payload.subject_id is not None:
        if not db.query(Subject).filter(Subject.id == payload.subject_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")

    group = StudyGroup(**payload.dict())
    group.members.append(StudyGroupMember(user_id=current_user.id, role=GroupRole.OWNER))
    db.add(group)
    current_user.total_points += CREATE_POINTS
    db.commit()
    db.refresh(group)
    logger.info(f"StudyGroup created: {group.id} by user {current_user.id}")
    return StudyGroupCreated(
        group=_to_public(group, current_user.id),
        message=f"Study group created successfully! +{CREATE_POINTS} points earned.",
    )


@router.post("/{group_id}/join", response_model=GroupMembershipResponse)
def join_group(
    group_id: int,
    payload: JoinGroupRequest | None = None,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> GroupMembershipResponse:
    group = db.query(StudyGroup).filter(StudyGroup.id == group_id).first()
    if not group:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Study group not found")
    if any(member.user_id == current_user.id for member in group.members):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You are already a member of this group",
        )
    if len(group.members) >= group.max_members:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="This study group is full"
        )

    group.members.append(StudyGroupMember(user_id=current_user.id, role=GroupRole.MEMBER))
    current_user.total_points += JOIN_POINTS
    db.commit()

    owner = next((m for m in group.members if m.role == GroupRole.OWNER), None)
    if owner:
        note = f": {payload.message}" if payload and payload.message else ""
        logger.info(
            f"StudyGroup {group.id}: user {current_user.id} joined, notifying owner {owner.user_id}{note}"
        )
    return GroupMembershipResponse(
        success=True,
        message=f"Successfully joined the study group! +{JOIN_POINTS} points earned.",
    )


@router.delete("/{group_id}/join", response_model=GroupMembershipResponse)
def leave_group(
    group_id: int,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> GroupMembershipResponse:
    membership = (
        db.query(StudyGroupMember)
        .filter(
            StudyGroupMember.group_id == group_id,
            StudyGroupMember.user_id == current_user.id,
        )
        .first()
    )
    if not membership:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You are not a member of this group",
        )

    group = membership.group
    if membership.role == GroupRole.OWNER:
        owners = sum(1 for m in group.members if m.role == GroupRole.OWNER)
        if len(group.members) == 1:
            db.delete(group)
            db.commit()
            logger.info(f"StudyGroup {group_id} deleted after its last member left")
            return GroupMembershipResponse(
                success=True, message="Group deleted as you were the only member."
            )
        if owners == 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    "You are the only owner. Please promote another member to owner "
                    "before leaving or delete the group."
                ),
            )

    group.members.remove(membership)
    db.commit()
    return GroupMembershipResponse(success=True, message="Successfully left the study group.")
