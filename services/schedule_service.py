# services/schedule_service.py
"""
Maintenance Schedule Service - lifecycle and trigger execution.

Coordinates the target resolver, recurrence calculator, time-slot allocator
and work-item factory, and writes the audit trail and notifications for
every schedule transition.

Lifecycle:
     create  -> ACTIVE_RUNNING (fires at once when its first date is today or earlier)
     activate   INACTIVE -> active (a stale pause flag is kept; resume to fire again)
     deactivate any -> INACTIVE
     pause      ACTIVE_RUNNING -> ACTIVE_PAUSED
     resume     ACTIVE_PAUSED -> ACTIVE_RUNNING
     delete     terminal; logs survive with schedule_id nulled

Usage:
     service = MaintenanceScheduleService(db)
     schedule = service.create_schedule({...}, creator_id=1)
     result = service.trigger(schedule.id)
     print(result.created_request_ids, result.errors)
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import (
     MaintenanceLog,
     MaintenanceNotification,
     MaintenanceRequest,
     MaintenanceSchedule,
     NotificationType,
     ScheduleState,
)
from services.exceptions import InvalidStateError, NotFoundError
from services.maintenance_log_service import MaintenanceLogService, snapshot_schedule
from services.notification_service import NotificationService
from services.recurrence import first_trigger_date, is_pending, next_trigger_for
from services.request_factory import RequestFactory
from services.side_effects import run_best_effort
from services.target_resolver import parse_id_list, resolve_target_units
from services.time_slots import TimeSlotAllocator
from services.unit_directory import UnitDirectory

logger = logging.getLogger(__name__)

# Columns a caller may set through create / update
SCHEDULE_FIELDS = (
     "title",
     "description",
     "category",
     "recurrence_type",
     "recurrence_interval",
     "recurrence_day_of_week",
     "recurrence_day_of_month",
     "target_type",
     "target_units",
     "start_date",
     "end_date",
     "notify_days_before",
     "notify_users",
     "estimated_cost",
     "assigned_to_user_id",
     "priority",
     "is_active",
)


# ----------------------------------------------------------------------
# Single-flight guard
# ----------------------------------------------------------------------

_trigger_locks: Dict[int, threading.Lock] = {}
_trigger_locks_guard = threading.Lock()


@contextmanager
def single_flight(schedule_id: int) -> Iterator[bool]:
     """
     Process-local guard so one schedule is never triggered twice at once.

     Yields True when the caller owns the trigger, False when another
     trigger of the same schedule is already running in this process.
     The lock is released when the fan-out returns, before the caller's
     session commits; a second trigger that starts inside that window is
     only stopped by the cadence columns once the first commit lands.
     """
     with _trigger_locks_guard:
          lock = _trigger_locks.setdefault(schedule_id, threading.Lock())
          acquired = lock.acquire(blocking=False)
     try:
          yield acquired
     finally:
          if acquired:
               # Evicted by the holder only, so the map never outgrows the triggers in flight
               with _trigger_locks_guard:
                    _trigger_locks.pop(schedule_id, None)
                    lock.release()


# ----------------------------------------------------------------------
# Results
# ----------------------------------------------------------------------

@dataclass
class TriggerResult:
     """Outcome of one trigger run."""
     schedule_id: int
     triggered: bool = False
     target_unit_ids: List[int] = field(default_factory=list)
     created_request_ids: List[int] = field(default_factory=list)
     errors: int = 0
     skipped_reason: Optional[str] = None
     last_triggered_date: Optional[date] = None
     next_trigger_date: Optional[date] = None


@dataclass
class AffectedUnit:
     """Preview row: what a trigger would do for one unit."""
     unit_id: int
     unit_number: Optional[str]
     floor: Optional[int]
     tenant_name: Optional[str]
     tenant_email: Optional[str]
     preferred_date_time: str
     has_conflict: bool


class MaintenanceScheduleService:

     def __init__(
          self,
          db: Session,
          logs: Optional[MaintenanceLogService] = None,
          notifications: Optional[NotificationService] = None,
          directory: Optional[UnitDirectory] = None,
          clock: Callable[[], date] = date.today,
     ):
          self.db = db
          self.logs = logs or MaintenanceLogService(db)
          self.notifications = notifications or NotificationService(db)
          self.directory = directory or UnitDirectory(db)
          self.slots = TimeSlotAllocator(self.directory)
          self.factory = RequestFactory(db, self.directory)
          self.clock = clock

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def list_active_schedules(self) -> List[MaintenanceSchedule]:
          return (
               self.db.query(MaintenanceSchedule)
               .filter(MaintenanceSchedule.is_active.is_(True))
               .order_by(MaintenanceSchedule.next_trigger_date, MaintenanceSchedule.id)
               .all()
          )

     def get_schedule(self, schedule_id: int) -> MaintenanceSchedule:
          schedule = self.db.get(MaintenanceSchedule, schedule_id)
          if schedule is None:
               raise NotFoundError("Schedule", schedule_id)
          return schedule

     def logs_for_schedule(self, schedule_id: int) -> List[MaintenanceLog]:
          self.get_schedule(schedule_id)
          return self.logs.logs_for_schedule(schedule_id)

     # ------------------------------------------------------------------
     # CRUD
     # ------------------------------------------------------------------

     def _check_user(self, user_id: Optional[int]) -> None:
          if user_id is not None and not self.directory.user_exists(user_id):
               raise NotFoundError("User", user_id)

     def _apply_fields(self, schedule: MaintenanceSchedule, data: Dict[str, Any]) -> None:
          for key in SCHEDULE_FIELDS:
               if key in data:
                    setattr(schedule, key, data[key])
          if schedule.end_date is not None and schedule.start_date is not None and schedule.end_date < schedule.start_date:
               raise InvalidStateError("End date cannot be before start date")

     def create_schedule(self, data: Dict[str, Any], creator_id: int) -> MaintenanceSchedule:
          """
          Create a schedule and fire it immediately when its first date has arrived.

          Raises:
               NotFoundError: creator or assignee does not exist
          """
          if not self.directory.user_exists(creator_id):
               raise NotFoundError("User", creator_id)
          self._check_user(data.get("assigned_to_user_id"))

          today = self.clock()
          schedule = MaintenanceSchedule(is_active=True, is_paused=False, recurrence_interval=1, notify_days_before=3)
          self._apply_fields(schedule, data)
          schedule.created_by_user_id = creator_id
          schedule.last_triggered_date = None
          schedule.next_trigger_date = first_trigger_date(schedule.start_date, schedule.end_date, today)

          self.db.add(schedule)
          self.db.flush()
          logger.info("Created schedule %s (%s), next trigger %s", schedule.id, schedule.title, schedule.next_trigger_date)

          run_best_effort(self.db, "log schedule creation", self.logs.log_schedule_created, schedule, creator_id)

          notify_users = parse_id_list(schedule.notify_users)
          if notify_users:
               run_best_effort(
                    self.db,
                    "send schedule created notifications",
                    self.notifications.notify_schedule_created,
                    schedule,
                    notify_users,
               )

          if schedule.next_trigger_date <= today and schedule.can_fire:
               logger.info("Auto-triggering schedule %s as its first date is today or in the past", schedule.id)
               try:
                    with self.db.begin_nested():
                         self._trigger_guarded(schedule, today, creator_id, periodic=True)
               except Exception:
                    logger.exception("Failed to auto-trigger schedule %s", schedule.id)

          return schedule

     def update_schedule(self, schedule_id: int, data: Dict[str, Any], editor_id: Optional[int]) -> MaintenanceSchedule:
          schedule = self.get_schedule(schedule_id)
          self._check_user(data.get("assigned_to_user_id"))

          old_snapshot = snapshot_schedule(schedule)
          self._apply_fields(schedule, data)
          schedule.next_trigger_date = next_trigger_for(schedule, self.clock())
          self.db.flush()
          logger.info("Updated schedule %s, next trigger %s", schedule.id, schedule.next_trigger_date)

          run_best_effort(self.db, "log schedule update", self.logs.log_schedule_updated, schedule, old_snapshot, editor_id)
          return schedule

     def delete_schedule(self, schedule_id: int, editor_id: Optional[int]) -> None:
          """
          Hard-delete a schedule.

          The SCHEDULE_DELETED entry is committed before the row goes away, so
          the audit trail survives even if the delete itself fails afterwards.
          Work items keep their plain schedule_id; logs and notifications are
          detached (schedule_id set to NULL).
          """
          schedule = self.get_schedule(schedule_id)
          self.logs.log_schedule_deleted(schedule, editor_id)
          self.db.commit()

          self.db.query(MaintenanceLog).filter(MaintenanceLog.schedule_id == schedule_id).update(
               {MaintenanceLog.schedule_id: None}, synchronize_session="fetch"
          )
          self.db.query(MaintenanceNotification).filter(MaintenanceNotification.schedule_id == schedule_id).update(
               {MaintenanceNotification.schedule_id: None}, synchronize_session="fetch"
          )
          self.db.delete(schedule)
          self.db.flush()
          logger.info("Deleted schedule %s", schedule_id)

     # ------------------------------------------------------------------
     # Lifecycle transitions
     # ------------------------------------------------------------------

     def activate(self, schedule_id: int, user_id: Optional[int]) -> MaintenanceSchedule:
          schedule = self.get_schedule(schedule_id)
          if schedule.is_active:
               raise InvalidStateError("Schedule is already active")
          schedule.is_active = True
          self.db.flush()
          if schedule.is_paused:
               logger.warning("Schedule %s activated while paused; it will not fire until resumed", schedule.id)
          run_best_effort(self.db, "log schedule activation", self.logs.log_schedule_activated, schedule, user_id)
          return schedule

     def deactivate(self, schedule_id: int, user_id: Optional[int]) -> MaintenanceSchedule:
          schedule = self.get_schedule(schedule_id)
          schedule.is_active = False
          self.db.flush()
          run_best_effort(self.db, "log schedule deactivation", self.logs.log_schedule_deactivated, schedule, user_id)
          return schedule

     def pause(self, schedule_id: int, user_id: Optional[int]) -> MaintenanceSchedule:
          schedule = self.get_schedule(schedule_id)
          if schedule.state != ScheduleState.ACTIVE_RUNNING:
               raise InvalidStateError(f"Cannot pause a schedule in state {schedule.state.value}")
          schedule.is_paused = True
          self.db.flush()
          run_best_effort(self.db, "log schedule pause", self.logs.log_schedule_paused, schedule, user_id)
          return schedule

     def resume(self, schedule_id: int, user_id: Optional[int]) -> MaintenanceSchedule:
          schedule = self.get_schedule(schedule_id)
          if schedule.state != ScheduleState.ACTIVE_PAUSED:
               raise InvalidStateError(f"Cannot resume a schedule in state {schedule.state.value}")
          schedule.is_paused = False
          self.db.flush()
          run_best_effort(self.db, "log schedule resume", self.logs.log_schedule_resumed, schedule, user_id)
          return schedule

     # ------------------------------------------------------------------
     # Triggering
     # ------------------------------------------------------------------

     def trigger(
          self,
          schedule_id: int,
          user_id: Optional[int] = None,
          periodic: bool = False,
          today: Optional[date] = None,
     ) -> TriggerResult:
          """
          Fan a schedule out into one work item per occupied target unit.

          The manual path (periodic=False) rejects schedules that cannot fire
          and triggers already in flight; the periodic path skips them.
          """
          schedule = self.get_schedule(schedule_id)
          today = today or self.clock()

          if not schedule.can_fire:
               if periodic:
                    logger.error(
                         "Due schedule %s is %s; skipping (due query should have excluded it)",
                         schedule.id,
                         schedule.state.value,
                    )
                    return TriggerResult(schedule_id=schedule.id, skipped_reason=schedule.state.value)
               raise InvalidStateError(f"Cannot trigger a schedule in state {schedule.state.value}")

          return self._trigger_guarded(schedule, today, user_id, periodic)

     def _trigger_guarded(self, schedule: MaintenanceSchedule, today: date, user_id: Optional[int], periodic: bool) -> TriggerResult:
          with single_flight(schedule.id) as acquired:
               if not acquired:
                    if periodic:
                         logger.warning("Schedule %s is already being triggered; skipping", schedule.id)
                         return TriggerResult(schedule_id=schedule.id, skipped_reason="IN_FLIGHT")
                    raise InvalidStateError("Schedule is already being triggered")
               return self._fan_out(schedule, today, user_id)

     def _fan_out(self, schedule: MaintenanceSchedule, today: date, user_id: Optional[int]) -> TriggerResult:
          logger.info("Triggering schedule %s (%s)", schedule.id, schedule.title)
          unit_ids = resolve_target_units(schedule.target_type, schedule.target_units, self.directory)
          result = TriggerResult(schedule_id=schedule.id, triggered=True, target_unit_ids=unit_ids)

          for unit_id in unit_ids:
               try:
                    with self.db.begin_nested():
                         request = self.factory.create_for_unit(schedule, unit_id)
               except Exception:
                    logger.exception("Failed to create work item for unit %s from schedule %s", unit_id, schedule.id)
                    result.errors += 1
                    continue
               result.created_request_ids.append(request.id)
               result.errors += self._after_request_created(schedule, request, unit_id)

          # Cadence moves only once every unit has been attempted
          schedule.last_triggered_date = today
          schedule.next_trigger_date = next_trigger_for(schedule, today)
          self.db.flush()

          description = (
               f"Schedule triggered: {schedule.title} "
               f"({len(result.created_request_ids)} requests, {result.errors} errors)"
          )
          if not run_best_effort(self.db, "log schedule trigger", self.logs.log_schedule_triggered, schedule, user_id, description):
               result.errors += 1

          result.last_triggered_date = schedule.last_triggered_date
          result.next_trigger_date = schedule.next_trigger_date
          logger.info(
               "Schedule %s created %d requests (%d errors), next trigger %s",
               schedule.id,
               len(result.created_request_ids),
               result.errors,
               schedule.next_trigger_date,
          )
          return result

     def _after_request_created(self, schedule: MaintenanceSchedule, request: MaintenanceRequest, unit_id: int) -> int:
          """Audit entry plus assignee and tenant notices; returns the number of failures."""
          failures = 0
          if not run_best_effort(
               self.db,
               f"log work item #{request.id}",
               self.logs.log_request_created_from_schedule,
               request,
               schedule,
          ):
               failures += 1

          if schedule.assigned_to_user_id is not None:
               if not run_best_effort(
                    self.db,
                    f"notify assignee of work item #{request.id}",
                    self.notifications.notify_maintenance_assigned,
                    request,
                    schedule.assigned_to_user_id,
               ):
                    failures += 1

          if not run_best_effort(self.db, f"notify tenant of unit {unit_id}", self._notify_tenant, schedule, request, unit_id):
               failures += 1
          return failures

     def _notify_tenant(self, schedule: MaintenanceSchedule, request: MaintenanceRequest, unit_id: int) -> None:
          tenant = self.directory.current_tenant(unit_id)
          if tenant is None or not tenant.email:
               return
          tenant_user_id = self.directory.resolve_user_by_email(tenant.email)
          if tenant_user_id is None:
               logger.warning("No user found for tenant email: %s", tenant.email)
               return
          notice = self.notifications.notify_scheduled_maintenance_created(
               request, tenant_user_id, tenant, self.directory.get_unit(unit_id), schedule
          )
          if notice is not None:
               run_best_effort(
                    self.db,
                    f"log notice for work item #{request.id}",
                    self.logs.log_notification_sent,
                    NotificationType.SCHEDULE_REMINDER.value,
                    schedule,
                    request,
               )

     def trigger_for_unit(
          self,
          schedule_id: int,
          unit_id: int,
          explicit_time: Optional[str] = None,
          user_id: Optional[int] = None,
     ) -> MaintenanceRequest:
          """
          Create one pre-confirmed (IN_PROGRESS) work item for a single unit.

          Target resolution is bypassed and the schedule's own last/next
          trigger dates are left untouched.
          """
          schedule = self.get_schedule(schedule_id)
          if not schedule.is_active:
               raise InvalidStateError("Cannot trigger inactive schedule")
          if self.directory.get_unit(unit_id) is None:
               raise NotFoundError("Unit", unit_id)
          if not self.directory.is_occupied(unit_id):
               raise InvalidStateError("Unit is not occupied")

          request = self.factory.create_confirmed_for_unit(schedule, unit_id, explicit_time)
          self._after_request_created(schedule, request, unit_id)
          logger.info("Triggered schedule %s for unit %s", schedule.id, unit_id)
          return request

     def get_affected_units_preview(self, schedule_id: int) -> List[AffectedUnit]:
          """Read-only view of the units, tenants and slots a trigger would use."""
          schedule = self.get_schedule(schedule_id)
          preview = []
          for unit_id in resolve_target_units(schedule.target_type, schedule.target_units, self.directory):
               unit = self.directory.get_unit(unit_id)
               if unit is None:
                    continue
               tenant = self.directory.current_tenant(unit_id)
               preferred = self.slots.find_available_slot(unit_id, schedule.next_trigger_date)
               preview.append(
                    AffectedUnit(
                         unit_id=unit_id,
                         unit_number=unit.unit_number,
                         floor=unit.floor,
                         tenant_name=tenant.full_name if tenant else None,
                         tenant_email=tenant.email if tenant else None,
                         preferred_date_time=preferred,
                         has_conflict=self.slots.has_conflict(unit_id, preferred),
                    )
               )
          logger.info("Found %d occupied units for schedule %s", len(preview), schedule.id)
          return preview

     # ------------------------------------------------------------------
     # Periodic entry points
     # ------------------------------------------------------------------

     def find_due_schedules(self, today: date) -> List[MaintenanceSchedule]:
          return (
               self.db.query(MaintenanceSchedule)
               .filter(
                    MaintenanceSchedule.is_active.is_(True),
                    MaintenanceSchedule.is_paused.is_(False),
                    MaintenanceSchedule.next_trigger_date <= today,
                    or_(MaintenanceSchedule.end_date.is_(None), MaintenanceSchedule.end_date >= today),
                    or_(
                         MaintenanceSchedule.last_triggered_date.is_(None),
                         MaintenanceSchedule.last_triggered_date < MaintenanceSchedule.next_trigger_date,
                    ),
               )
               .order_by(MaintenanceSchedule.next_trigger_date, MaintenanceSchedule.id)
               .all()
          )

     def evaluate_due_schedules(self, today: Optional[date] = None) -> List[TriggerResult]:
          """Trigger every due schedule; one failing schedule never stops the rest."""
          today = today or self.clock()
          due = self.find_due_schedules(today)
          logger.info("Found %d schedules to trigger", len(due))

          results = []
          for schedule in due:
               schedule_id = schedule.id
               try:
                    with self.db.begin_nested():
                         results.append(self.trigger(schedule_id, periodic=True, today=today))
               except Exception:
                    logger.exception("Error triggering schedule ID: %s", schedule_id)
                    results.append(TriggerResult(schedule_id=schedule_id, errors=1, skipped_reason="ERROR"))
          return results

     def send_upcoming_notifications(self, today: Optional[date] = None) -> int:
          """Remind notify_users when today is notify_days_before ahead of the next run."""
          today = today or self.clock()
          sent = 0
          for schedule in self.list_active_schedules():
               if not schedule.notify_days_before or schedule.notify_days_before <= 0 or not is_pending(schedule):
                    continue
               days_until = (schedule.next_trigger_date - today).days
               if days_until != schedule.notify_days_before:
                    continue
               user_ids = parse_id_list(schedule.notify_users)
               if not user_ids:
                    continue
               logger.info("Sending upcoming maintenance notification for: %s (in %d days)", schedule.title, days_until)
               try:
                    with self.db.begin_nested():
                         sent += self.notifications.notify_upcoming_maintenance(schedule, user_ids, days_until)
               except Exception:
                    logger.exception("Error sending notification for schedule ID: %s", schedule.id)
          return sent

     def check_overdue_schedules(self, today: Optional[date] = None) -> int:
          """Notify notify_users of running schedules whose pending run is in the past."""
          today = today or self.clock()
          sent = 0
          for schedule in self.list_active_schedules():
               if not schedule.can_fire or not is_pending(schedule) or schedule.next_trigger_date >= today:
                    continue
               user_ids = parse_id_list(schedule.notify_users)
               if not user_ids:
                    continue
               logger.info("Sending overdue notification for: %s", schedule.title)
               try:
                    with self.db.begin_nested():
                         sent += self.notifications.notify_overdue_maintenance(schedule, user_ids)
               except Exception:
                    logger.exception("Error sending overdue notification for schedule ID: %s", schedule.id)
          return sent
