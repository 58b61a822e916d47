# services/__init__.py
from .exceptions import MaintenanceError, NotFoundError, InvalidStateError
from .unit_directory import UnitDirectory, TenantInfo
from .maintenance_log_service import MaintenanceLogService
from .notification_service import NotificationService
from .maintenance_request_service import MaintenanceRequestService
from .schedule_service import MaintenanceScheduleService, TriggerResult, AffectedUnit

__all__ = [
     "MaintenanceError",
     "NotFoundError",
     "InvalidStateError",
     "UnitDirectory",
     "TenantInfo",
     "MaintenanceLogService",
     "NotificationService",
     "MaintenanceRequestService",
     "MaintenanceScheduleService",
     "TriggerResult",
     "AffectedUnit",
]
