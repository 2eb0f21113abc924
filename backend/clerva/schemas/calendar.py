from datetime import datetime

from pydantic import BaseModel, Field, validator

from clerva.models.calendar_event import EventType


class CalendarEventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    type: EventType
    location: str | None = Field(default=None, max_length=255)
    is_all_day: bool = False
    color: str | None = Field(default=None, max_length=16)

    @validator("title", pre=True)
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class CalendarEventUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    type: EventType | None = None
    location: str | None = Field(default=None, max_length=255)
    is_all_day: bool | None = None
    color: str | None = Field(default=None, max_length=16)


class CalendarItem(BaseModel):
    """One entry of the merged calendar, keyed by ``<source>-<id>``."""

    id: str
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    type: str
    color: str
    location: str | None = None
    is_all_day: bool = False
    source: str
    participants: list[str] = Field(default_factory=list)


class CalendarEventResponse(BaseModel):
    success: bool
    event: CalendarItem


class CalendarDeleteResponse(BaseModel):
    success: bool
    message: str
