import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from clerva.api import deps
from clerva.db.session import get_db
from clerva.models.user import User
from clerva.schemas.privacy import (
    DataRights,
    PrivacyActionRequest,
    PrivacyActionResponse,
    PrivacyOverview,
)
from clerva.services import privacy as privacy_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=PrivacyOverview)
def read_privacy(
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> PrivacyOverview:
    settings = privacy_service.get_privacy_settings(current_user)
    return PrivacyOverview(
        privacy_settings=settings,
        data_rights=DataRights(export=settings.data_export_enabled),
        last_updated=current_user.updated_at,
    )


@router.post("", response_model=PrivacyActionResponse)
def privacy_action(
    payload: PrivacyActionRequest,
    db: Session = Depends(get_db),  # noqa: B008
    current_user: User = Depends(deps.get_current_user),  # noqa: B008
) -> PrivacyActionResponse:
    user_id = current_user.id
    now = datetime.utcnow()

    if payload.action == "update_settings":
        if payload.settings is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Settings are required"
            )
        try:
            settings = privacy_service.update_privacy_settings(db, current_user, payload.settings)
        except privacy_service.RetentionTooLongError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        logger.info(f"Privacy settings updated for user {user_id}")
        return PrivacyActionResponse(
            message="Privacy settings updated successfully",
            timestamp=now,
            data=settings.dict(),
        )

    if payload.action == "export_data":
        if not privacy_service.get_privacy_settings(current_user).data_export_enabled:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Data export is disabled"
            )
        data = privacy_service.export_user_data(db, current_user, now)
        logger.info(f"User data exported for user {user_id}")
        return PrivacyActionResponse(message="Data exported successfully", timestamp=now, data=data)

    if payload.action == "delete_data":
        privacy_service.delete_user_data(db, current_user)
        logger.info(f"User data deleted for user {user_id}")
        return PrivacyActionResponse(message="All user data deleted successfully", timestamp=now)

    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")
