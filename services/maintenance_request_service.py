# services/maintenance_request_service.py
"""
Maintenance Request Service - work-item lifecycle.

Handles tenant-initiated requests and every status transition of a work
item, whatever its origin. The transition itself is the primary effect;
the audit log entry and the requester notification that follow it are
best effort and never undo the transition.

Usage:
     service = MaintenanceRequestService(db)
     service.update_status(request_id, RequestStatus.APPROVED, user_id=current_user)
     service.complete_request(request_id, "Replaced the filter", user_id=current_user)
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from models import MaintenanceRequest, RequestStatus
from services.exceptions import InvalidStateError, NotFoundError
from services.maintenance_log_service import MaintenanceLogService
from services.notification_service import NotificationService
from services.side_effects import run_best_effort
from services.time_slots import TimeSlotAllocator, format_slot
from services.unit_directory import UnitDirectory

logger = logging.getLogger(__name__)

# Fields a tenant may set on a new request
REQUEST_FIELDS = (
     "unit_id",
     "title",
     "description",
     "category",
     "priority",
     "urgency",
     "preferred_time",
     "estimated_cost",
)


class MaintenanceRequestService:

     def __init__(
          self,
          db: Session,
          logs: Optional[MaintenanceLogService] = None,
          notifications: Optional[NotificationService] = None,
          directory: Optional[UnitDirectory] = None,
          clock: Callable[[], datetime] = datetime.now,
     ):
          self.db = db
          self.logs = logs or MaintenanceLogService(db)
          self.notifications = notifications or NotificationService(db)
          self.directory = directory or UnitDirectory(db)
          self.slots = TimeSlotAllocator(self.directory)
          self.clock = clock

     # ------------------------------------------------------------------
     # Reads
     # ------------------------------------------------------------------

     def get_request(self, request_id: int) -> MaintenanceRequest:
          request = self.db.get(MaintenanceRequest, request_id)
          if request is None:
               raise NotFoundError("Maintenance request", request_id)
          return request

     def list_by_unit(self, unit_id: int) -> List[MaintenanceRequest]:
          return self.directory.list_work_items(unit_id)

     def list_by_schedule(self, schedule_id: int) -> List[MaintenanceRequest]:
          return (
               self.db.query(MaintenanceRequest)
               .filter(MaintenanceRequest.schedule_id == schedule_id)
               .order_by(MaintenanceRequest.id)
               .all()
          )

     def available_slots(self, unit_id: int, target_date: date) -> List[Dict[str, Any]]:
          if self.directory.get_unit(unit_id) is None:
               raise NotFoundError("Unit", unit_id)
          return self.slots.available_slots(unit_id, target_date)

     # ------------------------------------------------------------------
     # Creation
     # ------------------------------------------------------------------

     def create_request(self, data: Dict[str, Any], user_id: Optional[int]) -> MaintenanceRequest:
          """Tenant-initiated request; always starts SUBMITTED."""
          unit_id = data.get("unit_id")
          if unit_id is not None and self.directory.get_unit(unit_id) is None:
               raise NotFoundError("Unit", unit_id)

          tenant_id = data.get("tenant_id")
          if tenant_id is None and unit_id is not None:
               tenant = self.directory.current_tenant(unit_id)
               tenant_id = tenant.tenant_id if tenant else None

          request = MaintenanceRequest(
               **{key: data[key] for key in REQUEST_FIELDS if key in data},
               tenant_id=tenant_id,
               status=RequestStatus.SUBMITTED,
               submitted_date=self.clock(),
               created_by_user_id=user_id,
               is_from_schedule=False,
          )
          self.db.add(request)
          self.db.flush()
          logger.info("Created maintenance request #%s for unit %s", request.id, unit_id)
          return request

     # ------------------------------------------------------------------
     # Status machine
     # ------------------------------------------------------------------

     def update_status(
          self,
          request_id: int,
          status: RequestStatus,
          notes: Optional[str] = None,
          user_id: Optional[int] = None,
     ) -> MaintenanceRequest:
          """
          Move a work item to `status`.

          Re-sending the current status changes nothing. The completion
          timestamp is stamped the first time the item reaches COMPLETED only.
          """
          request = self.get_request(request_id)
          status = RequestStatus(status)
          old_status = request.status
          if status == old_status:
               logger.info("Request #%s already %s, nothing to do", request.id, status.value)
               return request

          request.status = status
          if notes is not None and notes.strip():
               request.completion_notes = notes
          if status == RequestStatus.COMPLETED and request.completed_date is None:
               request.completed_date = self.clock()
          if user_id is not None:
               request.updated_by_user_id = user_id
          self.db.flush()
          logger.info("Request #%s status %s -> %s", request.id, old_status.value, status.value)

          run_best_effort(
               self.db,
               f"log status change of request #{request.id}",
               self.logs.log_request_status_changed,
               request,
               old_status.value,
               status.value,
               user_id,
          )
          self._notify_requester(request, status)
          return request

     def _notify_requester(self, request: MaintenanceRequest, status: RequestStatus) -> None:
          requester_id = request.created_by_user_id
          if requester_id is None:
               return

          if status == RequestStatus.COMPLETED:
               notify, args = self.notifications.notify_maintenance_completed, (request, requester_id)
          elif status in (RequestStatus.APPROVED, RequestStatus.IN_PROGRESS):
               notify, args = self.notifications.notify_status_changed, (request, requester_id, status.value)
          elif status == RequestStatus.CANCELLED:
               notify, args = self.notifications.notify_maintenance_cancelled, (request, requester_id)
          else:
               return

          run_best_effort(self.db, f"notify requester of request #{request.id}", notify, *args)

     def complete_request(
          self,
          request_id: int,
          completion_notes: Optional[str] = None,
          actual_cost: Optional[Decimal] = None,
          user_id: Optional[int] = None,
     ) -> MaintenanceRequest:
          request = self.get_request(request_id)
          if actual_cost is not None:
               request.actual_cost = actual_cost
          return self.update_status(request_id, RequestStatus.COMPLETED, completion_notes, user_id)

     def reject_request(self, request_id: int, reason: Optional[str] = None, user_id: Optional[int] = None) -> MaintenanceRequest:
          return self.update_status(request_id, RequestStatus.CANCELLED, reason, user_id)

     def assign_request(self, request_id: int, assignee_user_id: int, user_id: Optional[int] = None) -> MaintenanceRequest:
          request = self.get_request(request_id)
          if not self.directory.user_exists(assignee_user_id):
               raise NotFoundError("User", assignee_user_id)

          request.assigned_to_user_id = assignee_user_id
          request = self.update_status(request_id, RequestStatus.IN_PROGRESS, user_id=user_id)
          run_best_effort(
               self.db,
               f"notify assignee of request #{request.id}",
               self.notifications.notify_maintenance_assigned,
               request,
               assignee_user_id,
          )
          return request

     def select_time_slot(
          self,
          request_id: int,
          preferred_date: date,
          preferred_time: str,
          user_id: Optional[int] = None,
     ) -> MaintenanceRequest:
          """Tenant confirms a slot for a schedule-origin item awaiting confirmation."""
          request = self.get_request(request_id)
          if request.status != RequestStatus.PENDING_TENANT_CONFIRMATION:
               raise InvalidStateError("This request is not awaiting time selection")

          request.preferred_time = format_slot(preferred_date, preferred_time)
          logger.info("Time slot selected for request #%s: %s", request.id, request.preferred_time)
          return self.update_status(request_id, RequestStatus.SUBMITTED, user_id=user_id)
