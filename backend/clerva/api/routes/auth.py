import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.core.config import get_settings
from clerva.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from clerva.db.session import get_db
from clerva.models.user import User
from clerva.schemas import auth as auth_schema

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def _issue_tokens(user: User) -> auth_schema.TokenPair:
    return auth_schema.TokenPair(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
    )


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.environment == "production",
    )


@router.post(
    "/signup",
    response_model=auth_schema.SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
def signup(
    payload: auth_schema.SignupRequest,
    db: Session = Depends(get_db),  # noqa: B008
) -> auth_schema.SignupResponse:
    if _find_by_email(db, payload.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )
    user = User(
        email=payload.email.lower(),
        name=payload.name,
        hashed_password=get_password_hash(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User signed up: {user.id}")
    return auth_schema.SignupResponse(
        message="User created successfully",
        user=auth_schema.SignupUser.model_validate(user),
    )


@router.post("/signin", response_model=auth_schema.TokenPair)
def signin(
    payload: auth_schema.SigninRequest,
    response: Response,
    db: Session = Depends(get_db),  # noqa: B008
) -> auth_schema.TokenPair:
    user = _find_by_email(db, payload.email)
    if (
        not user
        or not user.hashed_password
        or not verify_password(payload.password, user.hashed_password)
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled",
        )
    tokens = _issue_tokens(user)
    _set_session_cookie(response, tokens.access_token)
    return tokens


@router.post("/refresh", response_model=auth_schema.TokenPair)
def refresh_token(
    payload: auth_schema.RefreshRequest,
    response: Response,
    db: Session = Depends(get_db),  # noqa: B008
) -> auth_schema.TokenPair:
    try:
        data = decode_token(payload.refresh_token)
        if data.get("type") != "refresh":
            raise ValueError("Invalid refresh token")
        user_id = int(data["sub"])
    except (ValueError, KeyError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from exc
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    tokens = _issue_tokens(user)
    _set_session_cookie(response, tokens.access_token)
    return tokens


@router.get("/session", response_model=auth_schema.SessionInfo | None)
def read_session(
    session: auth_schema.SessionInfo | None = Depends(deps.get_optional_session),  # noqa: B008
) -> auth_schema.SessionInfo | None:
    return session


@router.post("/signout")
def signout(response: Response) -> dict[str, str]:
    response.delete_cookie(get_settings().session_cookie_name)
    return {"message": "Signed out"}
