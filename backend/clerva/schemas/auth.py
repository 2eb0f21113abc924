import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, validator


PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def check_password_strength(password: str) -> str:
    if not PASSWORD_RULE.match(password):
        raise ValueError(
            "Password must contain at least one lowercase letter, "
            "one uppercase letter, and one number"
        )
    return password


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)

    @validator("name", pre=True)
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @validator("password")
    def validate_password_strength(cls, v):
        return check_password_strength(v)


class SignupUser(BaseModel):
    id: int
    name: str | None
    email: EmailStr

    class Config:
        from_attributes = True


class SignupResponse(BaseModel):
    message: str
    user: SignupUser


class SigninRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class SessionUser(BaseModel):
    id: int
    email: EmailStr
    name: str | None = None
    image: str | None = None
    is_founder: bool = False
    is_admin: bool = False


class SessionInfo(BaseModel):
    """What the auth gate hands to route handlers."""

    user: SessionUser
    expires: datetime | None = None
