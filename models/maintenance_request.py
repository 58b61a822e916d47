# models/maintenance_request.py
"""
MaintenanceRequest model - one concrete unit of work against one unit.

Requests are either tenant-initiated (start SUBMITTED) or materialized from a
MaintenanceSchedule (is_from_schedule=True, schedule_id set). schedule_id is a
plain column: deleting a schedule leaves its already-created work intact.
"""
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Boolean, Enum
from .base import Base, TimestampMixin
from .maintenance_schedule import MaintenanceCategory, MaintenancePriority


class RequestStatus(str, enum.Enum):
     NOT_SUBMITTED = "NOT_SUBMITTED"
     PENDING_TENANT_CONFIRMATION = "PENDING_TENANT_CONFIRMATION"
     SUBMITTED = "SUBMITTED"
     WAITING_FOR_REPAIR = "WAITING_FOR_REPAIR"
     APPROVED = "APPROVED"
     IN_PROGRESS = "IN_PROGRESS"
     COMPLETED = "COMPLETED"
     CANCELLED = "CANCELLED"


# Statuses whose time slot counts as booked for conflict detection
OPEN_STATUSES = (RequestStatus.SUBMITTED, RequestStatus.IN_PROGRESS)


class Urgency(str, enum.Enum):
     LOW = "LOW"
     MEDIUM = "MEDIUM"
     HIGH = "HIGH"
     EMERGENCY = "EMERGENCY"


class MaintenanceRequest(TimestampMixin, Base):
     __tablename__ = "maintenance_requests"

     id = Column(Integer, primary_key=True, autoincrement=True)
     tenant_id = Column(Integer, nullable=True, index=True)
     unit_id = Column(Integer, nullable=True, index=True)

     title = Column(String(200), nullable=False)
     description = Column(Text, nullable=True)
     category = Column(
          Enum(MaintenanceCategory, name="maintenance_request_category", create_constraint=True),
          default=MaintenanceCategory.OTHER,
          nullable=False
     )
     priority = Column(
          Enum(MaintenancePriority, name="maintenance_request_priority", create_constraint=True),
          default=MaintenancePriority.MEDIUM,
          nullable=False
     )
     urgency = Column(
          Enum(Urgency, name="maintenance_urgency", create_constraint=True),
          default=Urgency.MEDIUM,
          nullable=False
     )

     preferred_time = Column(String(100), nullable=True)
     status = Column(
          Enum(RequestStatus, name="maintenance_request_status", create_constraint=True),
          default=RequestStatus.SUBMITTED,
          nullable=False,
          index=True
     )

     assigned_to_user_id = Column(Integer, nullable=True)
     estimated_cost = Column(Numeric(10, 2), nullable=True)
     actual_cost = Column(Numeric(10, 2), nullable=True)
     completion_notes = Column(Text, nullable=True)

     submitted_date = Column(DateTime, default=datetime.now, nullable=False)
     completed_date = Column(DateTime, nullable=True)

     created_by_user_id = Column(Integer, nullable=True)  # requester
     updated_by_user_id = Column(Integer, nullable=True)

     schedule_id = Column(Integer, nullable=True, index=True)
     is_from_schedule = Column(Boolean, default=False, nullable=False)

     @property
     def is_open(self) -> bool:
          return self.status in OPEN_STATUSES

     def __repr__(self):
          return f"<MaintenanceRequest(id={self.id}, unit_id={self.unit_id}, status='{self.status.value}')>"
