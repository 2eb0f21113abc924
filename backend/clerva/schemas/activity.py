from datetime import datetime

from pydantic import BaseModel


class ActivityItem(BaseModel):
    id: str
    type: str
    content: str
    time: str
    timestamp: datetime
    action_url: str
    action_text: str


class AdminActivity(BaseModel):
    id: str
    type: str
    message: str
    timestamp: datetime
    severity: str
