from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, validator

from clerva.models.study_group import GroupRole


class StudyGroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    subject_id: int | None = None
    max_members: int = Field(default=10, ge=2, le=50)
    is_private: bool = False
    location: str | None = Field(default=None, max_length=200)
    timezone: str | None = Field(default=None, max_length=50)
    schedule: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)

    @validator("name", pre=True)
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @validator("tags")
    def clean_tags(cls, v):
        return [tag.strip() for tag in v if tag.strip()]


class JoinGroupRequest(BaseModel):
    message: str | None = Field(default=None, max_length=300)


class GroupSubject(BaseModel):
    id: int
    name: str
    category: str

    class Config:
        from_attributes = True


class GroupMemberPublic(BaseModel):
    id: int
    name: str | None
    image: str | None = None
    role: GroupRole
    joined_at: datetime


class StudyGroupPublic(BaseModel):
    id: int
    name: str
    description: str | None
    subject: GroupSubject | None
    max_members: int
    current_members: int
    is_private: bool
    location: str | None
    timezone: str | None
    schedule: dict[str, Any] | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime
    members: list[GroupMemberPublic]
    can_join: bool
    is_member: bool
    is_owner: bool


class GroupPagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool


class GroupFilters(BaseModel):
    subject_id: int | None
    search: str | None
    my_groups: bool


class StudyGroupList(BaseModel):
    groups: list[StudyGroupPublic]
    pagination: GroupPagination
    filters: GroupFilters


class StudyGroupCreated(BaseModel):
    group: StudyGroupPublic
    message: str


class GroupMembershipResponse(BaseModel):
    success: bool
    message: str
