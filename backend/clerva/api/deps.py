from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from clerva.core.authorization import AuthorizationPolicy
from clerva.core.config import get_settings
from clerva.core.security import read_session_claims, read_session_subject
from clerva.db.session import get_db
from clerva.models.user import User
from clerva.schemas.auth import SessionInfo, SessionUser
from clerva.services.notifications import FeedbackNotifier

bearer_scheme = HTTPBearer(auto_error=False)


def get_authorization_policy() -> AuthorizationPolicy:
    return AuthorizationPolicy.from_settings(get_settings())


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> str | None:
    """The bearer header wins over the session cookie."""
    if credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


def get_session_user(
    token: str | None = Depends(get_session_token),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> User | None:
    """Resolve the session token to an active user, if any."""
    user_id = read_session_subject(token)
    if user_id is None:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        return None
    return user


def get_optional_session(
    user: User | None = Depends(get_session_user),  # noqa: B008
    policy: AuthorizationPolicy = Depends(get_authorization_policy),  # noqa: B008
    token: str | None = Depends(get_session_token),  # noqa: B008
) -> SessionInfo | None:
    if user is None:
        return None
    claims = read_session_claims(token)
    return SessionInfo(
        user=SessionUser(
            id=user.id,
            email=user.email,
            name=user.name,
            image=user.image,
            is_founder=policy.is_founder(user.email),
            is_admin=policy.is_admin(user.email),
        ),
        expires=claims[1] if claims else None,
    )


def get_current_user(
    user: User | None = Depends(get_session_user),  # noqa: B008
) -> User:
    if user is None:
        raise _unauthorized()
    return user


def require_admin(
    current_user: User = Depends(get_current_user),  # noqa: B008
    policy: AuthorizationPolicy = Depends(get_authorization_policy),  # noqa: B008
) -> User:
    if not policy.is_admin(current_user.email):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized - Admin access required",
        )
    return current_user


def require_founder(
    current_user: User = Depends(get_current_user),  # noqa: B008
    policy: AuthorizationPolicy = Depends(get_authorization_policy),  # noqa: B008
) -> User:
    if not policy.is_founder(current_user.email):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized - Founder access required",
        )
    return current_user


def get_feedback_notifier(
    policy: AuthorizationPolicy = Depends(get_authorization_policy),  # noqa: B008
) -> FeedbackNotifier:
    return FeedbackNotifier(policy)
