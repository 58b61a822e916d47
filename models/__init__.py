# models/__init__.py
from .base import Base
from .user import User
from .tenant import Tenant
from .property import Property
from .property_unit import PropertyUnit
from .lease import Lease, LeaseStatus
from .maintenance_schedule import (
     MaintenanceSchedule,
     MaintenanceCategory,
     MaintenancePriority,
     RecurrenceType,
     TargetType,
     ScheduleState,
)
from .maintenance_request import MaintenanceRequest, RequestStatus, Urgency, OPEN_STATUSES
from .maintenance_log import MaintenanceLog, LogActionType
from .maintenance_notification import MaintenanceNotification, NotificationType

__all__ = [
     "Base",
     "User",
     "Tenant",
     "Property",
     "PropertyUnit",
     "Lease",
     "LeaseStatus",
     "MaintenanceSchedule",
     "MaintenanceCategory",
     "MaintenancePriority",
     "RecurrenceType",
     "TargetType",
     "ScheduleState",
     "MaintenanceRequest",
     "RequestStatus",
     "Urgency",
     "OPEN_STATUSES",
     "MaintenanceLog",
     "LogActionType",
     "MaintenanceNotification",
     "NotificationType",
]
