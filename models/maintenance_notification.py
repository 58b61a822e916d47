# models/maintenance_notification.py
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class NotificationType(str, enum.Enum):
     UPCOMING_MAINTENANCE = "UPCOMING_MAINTENANCE"
     OVERDUE = "OVERDUE"
     STATUS_CHANGE = "STATUS_CHANGE"
     COMPLETED = "COMPLETED"
     SCHEDULE_REMINDER = "SCHEDULE_REMINDER"
     ASSIGNED = "ASSIGNED"
     GENERAL = "GENERAL"


class MaintenanceNotification(Base):
     """
     Per-user maintenance message with read/unread state.
     Only the read flag changes after creation; owners may delete their own.
     """
     __tablename__ = "maintenance_notifications"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

     notification_type = Column(
          Enum(NotificationType, name="maintenance_notification_type", create_constraint=True),
          nullable=False
     )
     title = Column(String(255), nullable=False)
     message = Column(Text, nullable=True)

     schedule_id = Column(
          Integer,
          ForeignKey("maintenance_schedules.id", ondelete="SET NULL"),
          nullable=True,
          index=True
     )
     request_id = Column(Integer, nullable=True, index=True)

     is_read = Column(Boolean, default=False, nullable=False)
     read_at = Column(DateTime, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     user = relationship("User", back_populates="notifications")

     def mark_as_read(self, when) -> None:
          if not self.is_read:
               self.is_read = True
               self.read_at = when

     def __repr__(self):
          return f"<MaintenanceNotification(id={self.id}, user_id={self.user_id}, type='{self.notification_type.value}')>"
