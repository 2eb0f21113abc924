"""Per-request gate: path classification, sign-in redirects and security headers."""

import logging
import re
import secrets
import string
import time
from urllib.parse import unquote
from enum import Enum

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from clerva.core.config import get_settings
from clerva.core.security import read_session_subject

logger = logging.getLogger(__name__)

SIGN_IN_PATH = "/signin"

PUBLIC_PATHS = frozenset(
    {
        "/",
        "/about",
        "/features",
        "/pricing",
        "/privacy",
        "/terms",
        "/faq",
        "/signin",
        "/signup",
        "/auth/signin",
        "/auth/signup",
    }
)

AUTH_ONLY_PATHS = frozenset({"/onboarding"})

SKIP_PREFIXES = (
    "/api/",
    "/auth/",
    "/_next/",
    "/static/",
    "/docs",
    "/redoc",
    "/openapi.json",
)

SKIP_EXACT = frozenset({"/favicon.ico", "/robots.txt", "/sitemap.xml"})

SUSPICIOUS_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"union\s+select", re.IGNORECASE),
    re.compile(r"drop\s+table", re.IGNORECASE),
    re.compile(r"exec\s*\(", re.IGNORECASE),
]

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "X-DNS-Prefetch-Control": "off",
}

PRODUCTION_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-eval' 'unsafe-inline' https://www.googletagmanager.com; "
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "font-src 'self' https://fonts.gstatic.com; "
        "img-src 'self' data: https: blob:; "
        "connect-src 'self' https://api.openai.com https://www.googleapis.com; "
        "frame-ancestors 'none'; "
        "base-uri 'self'; "
        "form-action 'self';"
    ),
}

_BASE36 = string.digits + string.ascii_lowercase


class PathAccess(str, Enum):
    SKIP = "skip"
    PUBLIC = "public"
    AUTH_ONLY = "auth_only"
    PROTECTED = "protected"


def classify_path(path: str) -> PathAccess:
    if path in SKIP_EXACT or path.startswith(SKIP_PREFIXES):
        return PathAccess.SKIP
    if path in PUBLIC_PATHS:
        return PathAccess.PUBLIC
    if path in AUTH_ONLY_PATHS:
        return PathAccess.AUTH_ONLY
    return PathAccess.PROTECTED


def generate_request_id() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def is_suspicious(*values: str) -> bool:
    return any(pattern.search(value) for pattern in SUSPICIOUS_PATTERNS for value in values)


def _session_token(request: Request) -> str | None:
    settings = get_settings()
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return request.cookies.get(settings.session_cookie_name)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RequestGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        access = classify_path(request.url.path)

        if access in (PathAccess.PROTECTED, PathAccess.AUTH_ONLY):
            if read_session_subject(_session_token(request)) is None:
                return RedirectResponse(SIGN_IN_PATH, status_code=307)

        response = await call_next(request)
        self._apply_security_headers(request, response)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms"
        )
        return response

    def _apply_security_headers(self, request: Request, response: Response) -> None:
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        if get_settings().environment == "production":
            for name, value in PRODUCTION_HEADERS.items():
                response.headers[name] = value

        request_id = generate_request_id()
        response.headers["X-Request-ID"] = request_id

        url = unquote(str(request.url))
        user_agent = request.headers.get("user-agent", "")
        if is_suspicious(url, user_agent):
            logger.warning(
                "Security event: suspicious_request (severity=high)",
                extra={
                    "url": url,
                    "user_agent": user_agent,
                    "ip": _client_ip(request),
                    "request_id": request_id,
                },
            )
