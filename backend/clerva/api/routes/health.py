import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clerva.ai.adapter import StudyAIAdapter
from clerva.ai.factory import get_ai_adapter
from clerva.core.config import get_settings
from clerva.db.session import get_db
from clerva.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()

STARTED_AT = time.monotonic()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _database_connected(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Health check database query failed", exc_info=True)
        return False
    return True


@router.api_route("", methods=["GET", "POST"], response_model=HealthResponse)
def health_check(
    response: Response,
    db: Session = Depends(get_db),  # noqa: B008
    adapter: StudyAIAdapter = Depends(get_ai_adapter),  # noqa: B008
) -> HealthResponse:
    settings = get_settings()
    connected = _database_connected(db)

    if not connected:
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif adapter.is_fallback:
        overall = "degraded"
    else:
        overall = "healthy"

    response.headers.update(NO_CACHE_HEADERS)
    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=time.monotonic() - STARTED_AT,
        version=settings.app_version,
        environment=settings.environment,
        database="connected" if connected else "disconnected",
        services={
            "database": "connected" if connected else "disconnected",
            "ai": "fallback" if adapter.is_fallback else "available",
        },
    )
