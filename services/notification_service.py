# services/notification_service.py
"""
Maintenance Notification Service - per-user maintenance messages.

Notifications are created as side effects of schedule and work-item
events. Recipients that do not exist are skipped with a warning. When
MAINTENANCE_EMAIL_ENABLED is set, the tenant's scheduled-maintenance
notice is also emailed (best effort).
"""
import logging
import os
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from models import (
     MaintenanceNotification,
     MaintenanceRequest,
     MaintenanceSchedule,
     NotificationType,
     PropertyUnit,
     User,
)
from services.exceptions import NotFoundError
from utils.email import send_notification_email

logger = logging.getLogger(__name__)

EMAIL_ENABLED = os.getenv("MAINTENANCE_EMAIL_ENABLED", "false").lower() == "true"


def _label(value) -> str:
     return value.value if hasattr(value, "value") else str(value)


def format_schedule_date(value: Optional[date]) -> str:
     """date(2025, 1, 15) -> 'Wednesday, 15 January 2025'"""
     if value is None:
          return "To be confirmed"
     return f"{value.strftime('%A')}, {value.day} {value.strftime('%B %Y')}"


def format_cost(value) -> str:
     return f"PHP {Decimal(value):,.2f}"


def build_scheduled_maintenance_message(
     request: MaintenanceRequest,
     tenant_name: str,
     unit: Optional[PropertyUnit],
     scheduled_date: Optional[date],
) -> str:
     """Human-readable notice sent to a tenant when schedule work lands on their unit."""
     room = unit.unit_number if unit is not None else "-"
     floor = unit.floor if unit is not None and unit.floor is not None else "-"

     lines = [
          f"Dear {tenant_name},",
          "",
          "We would like to inform you that scheduled maintenance has been planned for your unit.",
          "",
          "Maintenance Details:",
          f"• Type: {request.title}",
          f"• Category: {_label(request.category)}",
          f"• Your Unit: Room {room} (Floor {floor})",
          f"• Scheduled Date: {format_schedule_date(scheduled_date)}",
          f"• Priority: {_label(request.priority)}",
     ]
     if request.description:
          lines.append(f"• Description: {request.description}")
     if request.estimated_cost is not None:
          lines.append(f"• Estimated Cost: {format_cost(request.estimated_cost)}")
     lines += [
          "",
          "ACTION REQUIRED:",
          "Please select your preferred time slot for this maintenance work.",
          "Visit the Maintenance section in your dashboard to choose an available time.",
          "",
          "If you have any questions, please contact the management office.",
          "",
          "Thank you for your cooperation.",
          "Management Team",
     ]
     return "\n".join(lines)


class NotificationService:
     """Notification sink backed by the maintenance_notifications table."""

     def __init__(
          self,
          db: Session,
          email_enabled: bool = EMAIL_ENABLED,
          email_sender: Callable[[str, str, str], None] = send_notification_email,
          clock: Callable[[], datetime] = datetime.now,
     ):
          self.db = db
          self.email_enabled = email_enabled
          self.email_sender = email_sender
          self.clock = clock

     # ------------------------------------------------------------------
     # Creation
     # ------------------------------------------------------------------

     def send(
          self,
          user_id: int,
          notification_type: NotificationType,
          title: str,
          message: str,
          schedule: Optional[MaintenanceSchedule] = None,
          request: Optional[MaintenanceRequest] = None,
     ) -> Optional[MaintenanceNotification]:
          """Create one notification; returns None when the user does not exist."""
          if user_id is None or self.db.get(User, user_id) is None:
               logger.warning("Notification skipped, user not found: %s", user_id)
               return None

          notification = MaintenanceNotification(
               user_id=user_id,
               notification_type=notification_type,
               title=title,
               message=message,
               schedule_id=schedule.id if schedule is not None else None,
               request_id=request.id if request is not None else None,
               is_read=False,
          )
          self.db.add(notification)
          self.db.flush()
          logger.info("Created %s notification for user %s", notification_type.value, user_id)
          return notification

     def notify_schedule_created(self, schedule: MaintenanceSchedule, user_ids: Iterable[int]) -> int:
          message = f"A new maintenance schedule has been created: {schedule.title}"
          sent = 0
          for user_id in user_ids:
               if self.send(user_id, NotificationType.SCHEDULE_REMINDER, "New Maintenance Schedule", message, schedule=schedule):
                    sent += 1
          return sent

     def notify_upcoming_maintenance(self, schedule: MaintenanceSchedule, user_ids: Iterable[int], days_until: int) -> int:
          message = f"Maintenance '{schedule.title}' is scheduled in {days_until} days"
          sent = 0
          for user_id in user_ids:
               if self.send(user_id, NotificationType.UPCOMING_MAINTENANCE, "Upcoming Maintenance", message, schedule=schedule):
                    sent += 1
          return sent

     def notify_overdue_maintenance(self, schedule: MaintenanceSchedule, user_ids: Iterable[int]) -> int:
          message = f"Maintenance '{schedule.title}' is overdue"
          sent = 0
          for user_id in user_ids:
               if self.send(user_id, NotificationType.OVERDUE, "Overdue Maintenance", message, schedule=schedule):
                    sent += 1
          return sent

     def notify_maintenance_assigned(self, request: MaintenanceRequest, user_id: int):
          return self.send(
               user_id,
               NotificationType.ASSIGNED,
               "Maintenance Request Assigned",
               f"You have been assigned to maintenance request: {request.title}",
               request=request,
          )

     def notify_status_changed(self, request: MaintenanceRequest, user_id: int, new_status: str):
          return self.send(
               user_id,
               NotificationType.STATUS_CHANGE,
               "Maintenance Status Updated",
               f"Maintenance request '{request.title}' status changed to {new_status}",
               request=request,
          )

     def notify_maintenance_cancelled(self, request: MaintenanceRequest, user_id: int):
          reason = f" Reason: {request.completion_notes}" if request.completion_notes else ""
          return self.send(
               user_id,
               NotificationType.STATUS_CHANGE,
               "Maintenance Cancelled",
               f"Maintenance request '{request.title}' has been cancelled.{reason}",
               request=request,
          )

     def notify_maintenance_completed(self, request: MaintenanceRequest, user_id: int):
          return self.send(
               user_id,
               NotificationType.COMPLETED,
               "Maintenance Completed",
               f"Maintenance request '{request.title}' has been completed",
               request=request,
          )

     def notify_scheduled_maintenance_created(
          self,
          request: MaintenanceRequest,
          user_id: int,
          tenant,
          unit: Optional[PropertyUnit],
          schedule: MaintenanceSchedule,
     ):
          message = build_scheduled_maintenance_message(
               request, tenant.full_name, unit, schedule.next_trigger_date
          )
          notification = self.send(
               user_id,
               NotificationType.SCHEDULE_REMINDER,
               "Scheduled Maintenance Notice",
               message,
               schedule=schedule,
               request=request,
          )
          if notification is not None and self.email_enabled and tenant.email:
               try:
                    self.email_sender(tenant.email, "Scheduled Maintenance Notice", message)
               except Exception:
                    logger.exception("Failed to email scheduled maintenance notice to %s", tenant.email)
          return notification

     # ------------------------------------------------------------------
     # Reads and read-state
     # ------------------------------------------------------------------

     def _for_user(self, user_id: int):
          return self.db.query(MaintenanceNotification).filter(MaintenanceNotification.user_id == user_id)

     def list_for_user(self, user_id: int, unread_only: bool = False) -> List[MaintenanceNotification]:
          query = self._for_user(user_id)
          if unread_only:
               query = query.filter(MaintenanceNotification.is_read.is_(False))
          return query.order_by(MaintenanceNotification.created_at.desc(), MaintenanceNotification.id.desc()).all()

     def count_unread(self, user_id: int) -> int:
          return self._for_user(user_id).filter(MaintenanceNotification.is_read.is_(False)).count()

     def _owned(self, notification_id: int, user_id: int) -> MaintenanceNotification:
          notification = self.db.get(MaintenanceNotification, notification_id)
          # Another user's notice reads as missing
          if notification is None or notification.user_id != user_id:
               raise NotFoundError("Notification", notification_id)
          return notification

     def mark_as_read(self, notification_id: int, user_id: int) -> MaintenanceNotification:
          notification = self._owned(notification_id, user_id)
          notification.mark_as_read(self.clock())
          self.db.flush()
          return notification

     def mark_all_as_read(self, user_id: int) -> int:
          unread = self._for_user(user_id).filter(MaintenanceNotification.is_read.is_(False)).all()
          now = self.clock()
          for notification in unread:
               notification.mark_as_read(now)
          self.db.flush()
          return len(unread)

     def delete_notification(self, notification_id: int, user_id: int) -> None:
          notification = self._owned(notification_id, user_id)
          self.db.delete(notification)
          self.db.flush()
          logger.info("Deleted notification %s for user %s", notification_id, user_id)

     def delete_old_read_notifications(self, days_old: int) -> int:
          cutoff = self.clock() - timedelta(days=days_old)
          count = (
               self.db.query(MaintenanceNotification)
               .filter(
                    MaintenanceNotification.is_read.is_(True),
                    MaintenanceNotification.read_at < cutoff,
               )
               .delete(synchronize_session=False)
          )
          logger.info("Deleted %d read notifications older than %d days", count, days_old)
          return count
