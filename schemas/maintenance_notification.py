# schemas/maintenance_notification.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from models import NotificationType


class NotificationResponse(BaseModel):
     """Schema for maintenance notification response."""
     id: int
     user_id: int
     notification_type: NotificationType
     title: str
     message: Optional[str] = None
     schedule_id: Optional[int] = None
     request_id: Optional[int] = None
     is_read: bool
     read_at: Optional[datetime] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
     count: int
