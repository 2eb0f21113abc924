from datetime import datetime

from pydantic import BaseModel

from clerva.models.subject import SkillLevel


class SubjectPublic(BaseModel):
    id: int
    name: str
    category: str
    description: str | None = None
    user_count: int = 0
    created_at: datetime


class CategoryCount(BaseModel):
    name: str
    count: int


class SubjectCatalog(BaseModel):
    subjects: list[SubjectPublic]
    categories: list[CategoryCount]
    total_subjects: int


class UserSubjectPublic(BaseModel):
    id: int
    name: str
    category: str
    description: str | None = None
    skill_level: SkillLevel
    is_active: bool
    added_at: datetime


class UserSubjectList(BaseModel):
    subjects: list[UserSubjectPublic]


class UserSubjectCreate(BaseModel):
    subject_id: int
    skill_level: SkillLevel = SkillLevel.BEGINNER


class UserSubjectResponse(BaseModel):
    user_subject: UserSubjectPublic
    message: str
