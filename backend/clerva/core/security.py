from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from clerva.core.config import get_settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password[:72], hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password[:72])


def _create_token(subject: str | int, expires_delta: timedelta, token_type: str) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "type": token_type,
        "exp": expire,
    }
    return jwt.encode(
        to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def create_access_token(subject: str | int) -> str:
    settings = get_settings()
    return _create_token(
        subject,
        timedelta(minutes=settings.access_token_expire_minutes),
        token_type="access",
    )


def create_refresh_token(subject: str | int) -> str:
    settings = get_settings()
    return _create_token(
        subject,
        timedelta(minutes=settings.refresh_token_expire_minutes),
        token_type="refresh",
    )


def decode_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:  # pragma: no cover - captured and re-raised upstream
        raise ValueError("Invalid token") from exc


def read_session_claims(token: str | None) -> tuple[int, datetime] | None:
    """Return (user id, expiry) for a valid access token, else None."""
    if not token:
        return None
    try:
        data = decode_token(token)
        if data.get("type") != "access":
            return None
        return int(data["sub"]), datetime.fromtimestamp(data["exp"], tz=timezone.utc)
    except (ValueError, KeyError, TypeError):
        return None


def read_session_subject(token: str | None) -> int | None:
    claims = read_session_claims(token)
    return claims[0] if claims else None
