# schemas/__init__.py
from .maintenance_schedule import (
     ScheduleCreate,
     ScheduleUpdate,
     ScheduleResponse,
     AffectedUnitResponse,
     TriggerResponse,
     TriggerUnitRequest,
)
from .maintenance_request import (
     MaintenanceRequestCreate,
     MaintenanceRequestResponse,
     StatusUpdate,
     CompleteRequest,
     RejectRequest,
     AssignRequest,
     TimeSlotSelection,
     TimeSlotResponse,
)
from .maintenance_notification import NotificationResponse, UnreadCountResponse
from .maintenance_log import MaintenanceLogResponse

__all__ = [
     "ScheduleCreate",
     "ScheduleUpdate",
     "ScheduleResponse",
     "AffectedUnitResponse",
     "TriggerResponse",
     "TriggerUnitRequest",
     "MaintenanceRequestCreate",
     "MaintenanceRequestResponse",
     "StatusUpdate",
     "CompleteRequest",
     "RejectRequest",
     "AssignRequest",
     "TimeSlotSelection",
     "TimeSlotResponse",
     "NotificationResponse",
     "UnreadCountResponse",
     "MaintenanceLogResponse",
]
