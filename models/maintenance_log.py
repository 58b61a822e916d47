# models/maintenance_log.py
"""
MaintenanceLog model - append-only audit trail of maintenance actions.

Logs outlive schedules: the schedule FK is nulled (ON DELETE SET NULL) when a
schedule is hard-deleted, and schedule_title keeps the entry readable.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class LogActionType(str, enum.Enum):
     SCHEDULE_CREATED = "SCHEDULE_CREATED"
     SCHEDULE_UPDATED = "SCHEDULE_UPDATED"
     SCHEDULE_DELETED = "SCHEDULE_DELETED"
     SCHEDULE_ACTIVATED = "SCHEDULE_ACTIVATED"
     SCHEDULE_DEACTIVATED = "SCHEDULE_DEACTIVATED"
     SCHEDULE_PAUSED = "SCHEDULE_PAUSED"
     SCHEDULE_RESUMED = "SCHEDULE_RESUMED"
     SCHEDULE_TRIGGERED = "SCHEDULE_TRIGGERED"
     REQUEST_CREATED_FROM_SCHEDULE = "REQUEST_CREATED_FROM_SCHEDULE"
     REQUEST_STATUS_CHANGED = "REQUEST_STATUS_CHANGED"
     NOTIFICATION_SENT = "NOTIFICATION_SENT"


class MaintenanceLog(Base):
     __tablename__ = "maintenance_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)

     schedule_id = Column(
          Integer,
          ForeignKey("maintenance_schedules.id", ondelete="SET NULL"),
          nullable=True,
          index=True
     )
     schedule_title = Column(String(200), nullable=True)
     request_id = Column(Integer, nullable=True, index=True)

     action_type = Column(
          Enum(LogActionType, name="maintenance_log_action", create_constraint=True),
          nullable=False
     )
     action_description = Column(Text, nullable=True)

     # Change tracking
     field_name = Column(String(100), nullable=True)
     previous_value = Column(Text, nullable=True)  # JSON
     new_value = Column(Text, nullable=True)  # JSON

     created_by_user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     schedule = relationship("MaintenanceSchedule", back_populates="logs")

     def __repr__(self):
          return f"<MaintenanceLog(id={self.id}, action='{self.action_type.value}', schedule_id={self.schedule_id})>"
