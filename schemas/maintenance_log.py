# schemas/maintenance_log.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from models import LogActionType


class MaintenanceLogResponse(BaseModel):
     """Schema for audit log entry response."""
     id: int
     schedule_id: Optional[int] = None
     schedule_title: Optional[str] = None
     request_id: Optional[int] = None
     action_type: LogActionType
     action_description: Optional[str] = None
     field_name: Optional[str] = None
     previous_value: Optional[str] = None
     new_value: Optional[str] = None
     created_by_user_id: Optional[int] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
