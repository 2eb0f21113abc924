from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class PrivacySettings(BaseModel):
    data_retention_days: int = Field(default=365, ge=1)
    allow_analytics: bool = True
    allow_marketing: bool = False
    allow_third_party: bool = False
    data_export_enabled: bool = True


class PrivacySettingsUpdate(BaseModel):
    data_retention_days: int | None = Field(default=None, ge=1)
    allow_analytics: bool | None = None
    allow_marketing: bool | None = None
    allow_third_party: bool | None = None
    data_export_enabled: bool | None = None


class DataRights(BaseModel):
    export: bool
    deletion: bool = True
    rectification: bool = True
    portability: bool = True


class PrivacyOverview(BaseModel):
    privacy_settings: PrivacySettings
    data_rights: DataRights
    last_updated: datetime


class PrivacyActionRequest(BaseModel):
    action: str
    settings: PrivacySettingsUpdate | None = None


class PrivacyActionResponse(BaseModel):
    message: str
    timestamp: datetime | None = None
    data: dict[str, Any] | None = None
