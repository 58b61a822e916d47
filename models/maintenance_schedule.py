# models/maintenance_schedule.py
"""
MaintenanceSchedule model - a recurring maintenance rule.

A schedule describes *what* should be done (title, category, priority, cost),
*when* (recurrence settings, start/end, next/last trigger dates) and *where*
(target type + opaque target payload). Firing a schedule materializes one
MaintenanceRequest per occupied target unit.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, Date, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class MaintenanceCategory(str, enum.Enum):
     PLUMBING = "PLUMBING"
     ELECTRICAL = "ELECTRICAL"
     HVAC = "HVAC"
     APPLIANCE = "APPLIANCE"
     STRUCTURAL = "STRUCTURAL"
     CLEANING = "CLEANING"
     OTHER = "OTHER"


class MaintenancePriority(str, enum.Enum):
     LOW = "LOW"
     MEDIUM = "MEDIUM"
     HIGH = "HIGH"
     URGENT = "URGENT"


class RecurrenceType(str, enum.Enum):
     ONE_TIME = "ONE_TIME"
     DAILY = "DAILY"
     WEEKLY = "WEEKLY"
     MONTHLY = "MONTHLY"
     QUARTERLY = "QUARTERLY"
     YEARLY = "YEARLY"


class TargetType(str, enum.Enum):
     ALL_UNITS = "ALL_UNITS"
     SPECIFIC_UNITS = "SPECIFIC_UNITS"
     FLOOR = "FLOOR"
     UNIT_TYPE = "UNIT_TYPE"


class ScheduleState(str, enum.Enum):
     """Single lifecycle view over the is_active / is_paused columns."""
     INACTIVE = "INACTIVE"
     ACTIVE_RUNNING = "ACTIVE_RUNNING"
     ACTIVE_PAUSED = "ACTIVE_PAUSED"


class MaintenanceSchedule(TimestampMixin, Base):
     __tablename__ = "maintenance_schedules"

     id = Column(Integer, primary_key=True, autoincrement=True)

     title = Column(String(200), nullable=False)
     description = Column(Text, nullable=True)
     category = Column(
          Enum(MaintenanceCategory, name="maintenance_category", create_constraint=True),
          default=MaintenanceCategory.OTHER,
          nullable=False
     )

     # Recurrence
     recurrence_type = Column(
          Enum(RecurrenceType, name="recurrence_type", create_constraint=True),
          default=RecurrenceType.ONE_TIME,
          nullable=False
     )
     recurrence_interval = Column(Integer, default=1, nullable=False)
     recurrence_day_of_week = Column(Integer, nullable=True)  # 0-6 (Sunday-Saturday)
     recurrence_day_of_month = Column(Integer, nullable=True)  # 1-31

     # Targeting
     target_type = Column(
          Enum(TargetType, name="target_type", create_constraint=True),
          default=TargetType.ALL_UNITS,
          nullable=False
     )
     target_units = Column(Text, nullable=True)  # JSON id list, floor number or unit type

     # Timing
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=True)
     next_trigger_date = Column(Date, nullable=False, index=True)
     last_triggered_date = Column(Date, nullable=True)

     # Notifications
     notify_days_before = Column(Integer, default=3, nullable=True)
     notify_users = Column(Text, nullable=True)  # JSON array of user ids

     # Work-item template
     estimated_cost = Column(Numeric(10, 2), nullable=True)
     assigned_to_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
     priority = Column(
          Enum(MaintenancePriority, name="maintenance_priority", create_constraint=True),
          default=MaintenancePriority.MEDIUM,
          nullable=False
     )

     # Lifecycle flags
     is_active = Column(Boolean, default=True, nullable=False, index=True)
     is_paused = Column(Boolean, default=False, nullable=False)

     created_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

     # Relationships
     assigned_to = relationship("User", foreign_keys=[assigned_to_user_id])
     created_by = relationship("User", foreign_keys=[created_by_user_id])
     logs = relationship("MaintenanceLog", back_populates="schedule", passive_deletes=True)

     @property
     def state(self) -> ScheduleState:
          if not self.is_active:
               return ScheduleState.INACTIVE
          if self.is_paused:
               return ScheduleState.ACTIVE_PAUSED
          return ScheduleState.ACTIVE_RUNNING

     @property
     def can_fire(self) -> bool:
          return self.state == ScheduleState.ACTIVE_RUNNING

     def __repr__(self):
          return (
               f"<MaintenanceSchedule(id={self.id}, title='{self.title}', "
               f"recurrence='{self.recurrence_type}', next={self.next_trigger_date})>"
          )
