# services/maintenance_log_service.py
"""
Maintenance Log Service - append-only audit trail.

Every schedule lifecycle transition and every work-item status change
writes exactly one MaintenanceLog row. Entries are added to the caller's
session and flushed; committing is the caller's job.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from models import MaintenanceLog, MaintenanceRequest, MaintenanceSchedule, LogActionType

logger = logging.getLogger(__name__)

# Fields compared on update; a snapshot is stored only when one of them changed
TRACKED_FIELDS = ("title", "category", "is_active")

SNAPSHOT_FIELDS = (
     "title",
     "description",
     "category",
     "recurrence_type",
     "recurrence_interval",
     "target_type",
     "target_units",
     "priority",
     "is_active",
     "is_paused",
)


def _plain(value: Any) -> Any:
     if hasattr(value, "value"):
          return value.value
     return value


def snapshot_schedule(schedule: MaintenanceSchedule) -> Dict[str, Any]:
     """Detached copy of the schedule fields used for change tracking."""
     return {field: _plain(getattr(schedule, field)) for field in SNAPSHOT_FIELDS}


def diff_snapshots(old: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
     return {
          field: {"old": old.get(field), "new": new.get(field)}
          for field in TRACKED_FIELDS
          if old.get(field) != new.get(field)
     }


class MaintenanceLogService:
     """Audit sink backed by the maintenance_logs table."""

     def __init__(self, db: Session):
          self.db = db

     # ------------------------------------------------------------------
     # Writes
     # ------------------------------------------------------------------

     def record(
          self,
          action_type: LogActionType,
          description: str,
          schedule: Optional[MaintenanceSchedule] = None,
          request: Optional[MaintenanceRequest] = None,
          user_id: Optional[int] = None,
          field_name: Optional[str] = None,
          previous_value: Optional[str] = None,
          new_value: Optional[str] = None,
     ) -> MaintenanceLog:
          entry = MaintenanceLog(
               schedule_id=schedule.id if schedule is not None else None,
               schedule_title=schedule.title if schedule is not None else None,
               request_id=request.id if request is not None else None,
               action_type=action_type,
               action_description=description,
               field_name=field_name,
               previous_value=previous_value,
               new_value=new_value,
               created_by_user_id=user_id,
          )
          self.db.add(entry)
          self.db.flush()
          logger.info("Logged %s (schedule=%s, request=%s)", action_type.value, entry.schedule_id, entry.request_id)
          return entry

     def log_schedule_created(self, schedule: MaintenanceSchedule, user_id: Optional[int]) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_CREATED,
               f"Maintenance schedule created: {schedule.title}",
               schedule=schedule,
               user_id=user_id,
          )

     def log_schedule_updated(
          self,
          schedule: MaintenanceSchedule,
          old_snapshot: Dict[str, Any],
          user_id: Optional[int],
     ) -> MaintenanceLog:
          new_snapshot = snapshot_schedule(schedule)
          previous_value = new_value = None
          if diff_snapshots(old_snapshot, new_snapshot):
               previous_value = json.dumps(old_snapshot)
               new_value = json.dumps(new_snapshot)
          return self.record(
               LogActionType.SCHEDULE_UPDATED,
               f"Maintenance schedule updated: {schedule.title}",
               schedule=schedule,
               user_id=user_id,
               previous_value=previous_value,
               new_value=new_value,
          )

     def log_schedule_deleted(self, schedule: MaintenanceSchedule, user_id: Optional[int]) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_DELETED,
               f"Maintenance schedule deleted: {schedule.title}",
               schedule=schedule,
               user_id=user_id,
          )

     def log_schedule_activated(self, schedule: MaintenanceSchedule, user_id: Optional[int]) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_ACTIVATED, f"Schedule activated: {schedule.title}", schedule=schedule, user_id=user_id
          )

     def log_schedule_deactivated(self, schedule: MaintenanceSchedule, user_id: Optional[int]) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_DEACTIVATED, f"Schedule deactivated: {schedule.title}", schedule=schedule, user_id=user_id
          )

     def log_schedule_paused(self, schedule: MaintenanceSchedule, user_id: Optional[int]) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_PAUSED, f"Schedule paused: {schedule.title}", schedule=schedule, user_id=user_id
          )

     def log_schedule_resumed(self, schedule: MaintenanceSchedule, user_id: Optional[int]) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_RESUMED, f"Schedule resumed: {schedule.title}", schedule=schedule, user_id=user_id
          )

     def log_schedule_triggered(
          self,
          schedule: MaintenanceSchedule,
          user_id: Optional[int] = None,
          description: Optional[str] = None,
     ) -> MaintenanceLog:
          return self.record(
               LogActionType.SCHEDULE_TRIGGERED,
               description or f"Schedule triggered: {schedule.title}",
               schedule=schedule,
               user_id=user_id,
          )

     def log_request_created_from_schedule(
          self,
          request: MaintenanceRequest,
          schedule: MaintenanceSchedule,
          user_id: Optional[int] = None,
     ) -> MaintenanceLog:
          return self.record(
               LogActionType.REQUEST_CREATED_FROM_SCHEDULE,
               f"Maintenance request created from schedule: {request.title}",
               schedule=schedule,
               request=request,
               user_id=user_id,
          )

     def log_request_status_changed(
          self,
          request: MaintenanceRequest,
          old_status: str,
          new_status: str,
          user_id: Optional[int] = None,
     ) -> MaintenanceLog:
          return self.record(
               LogActionType.REQUEST_STATUS_CHANGED,
               f"Request status changed from {old_status} to {new_status}",
               request=request,
               user_id=user_id,
               field_name="status",
               previous_value=json.dumps(old_status),
               new_value=json.dumps(new_status),
          )

     def log_notification_sent(
          self,
          notification_type: str,
          schedule: Optional[MaintenanceSchedule] = None,
          request: Optional[MaintenanceRequest] = None,
          user_id: Optional[int] = None,
     ) -> MaintenanceLog:
          return self.record(
               LogActionType.NOTIFICATION_SENT,
               f"Notification sent: {notification_type}",
               schedule=schedule,
               request=request,
               user_id=user_id,
          )

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def logs_for_schedule(self, schedule_id: int) -> List[MaintenanceLog]:
          return (
               self.db.query(MaintenanceLog)
               .filter(MaintenanceLog.schedule_id == schedule_id)
               .order_by(MaintenanceLog.created_at.desc(), MaintenanceLog.id.desc())
               .all()
          )

     def logs_for_request(self, request_id: int) -> List[MaintenanceLog]:
          return (
               self.db.query(MaintenanceLog)
               .filter(MaintenanceLog.request_id == request_id)
               .order_by(MaintenanceLog.created_at.desc(), MaintenanceLog.id.desc())
               .all()
          )

     def recent_logs(self, limit: int = 100) -> List[MaintenanceLog]:
          return (
               self.db.query(MaintenanceLog)
               .order_by(MaintenanceLog.created_at.desc(), MaintenanceLog.id.desc())
               .limit(limit)
               .all()
          )
