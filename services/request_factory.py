# services/request_factory.py
"""
Work-item factory - materializes MaintenanceRequest rows from a schedule.

Fan-out items start PENDING_TENANT_CONFIRMATION and wait for the tenant to
pick a slot. Single-unit manual triggers are treated as pre-confirmed and
start IN_PROGRESS with an explicit (or default 09:00) time.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from models import MaintenanceRequest, MaintenanceSchedule, RequestStatus, Urgency
from services.time_slots import format_slot
from services.unit_directory import TenantInfo, UnitDirectory

logger = logging.getLogger(__name__)


def default_unit_time(schedule: MaintenanceSchedule) -> str:
     return format_slot(schedule.next_trigger_date)


def build_request_from_schedule(
     schedule: MaintenanceSchedule,
     unit_id: int,
     tenant: Optional[TenantInfo] = None,
     requester_user_id: Optional[int] = None,
     preferred_time: Optional[str] = None,
     status: RequestStatus = RequestStatus.PENDING_TENANT_CONFIRMATION,
) -> MaintenanceRequest:
     """Copy the schedule's work template onto a new, unsaved MaintenanceRequest."""
     return MaintenanceRequest(
          unit_id=unit_id,
          tenant_id=tenant.tenant_id if tenant is not None else None,
          title=schedule.title,
          description=schedule.description,
          category=schedule.category,
          priority=schedule.priority,
          urgency=Urgency.MEDIUM,
          status=status,
          preferred_time=preferred_time,
          estimated_cost=schedule.estimated_cost,
          assigned_to_user_id=schedule.assigned_to_user_id,
          created_by_user_id=requester_user_id,
          schedule_id=schedule.id,
          is_from_schedule=True,
     )


class RequestFactory:
     """Builds and persists schedule-origin work items for one unit at a time."""

     def __init__(self, db: Session, directory: UnitDirectory):
          self.db = db
          self.directory = directory

     def create_for_unit(
          self,
          schedule: MaintenanceSchedule,
          unit_id: int,
          preferred_time: Optional[str] = None,
          status: RequestStatus = RequestStatus.PENDING_TENANT_CONFIRMATION,
     ) -> MaintenanceRequest:
          tenant = self.directory.current_tenant(unit_id)
          requester_user_id = self.directory.resolve_user_by_email(tenant.email) if tenant else None
          if tenant is not None and requester_user_id is None:
               logger.warning("No user account for tenant %s of unit %s", tenant.tenant_id, unit_id)

          request = build_request_from_schedule(
               schedule,
               unit_id,
               tenant=tenant,
               requester_user_id=requester_user_id,
               preferred_time=preferred_time,
               status=status,
          )
          self.db.add(request)
          self.db.flush()
          logger.info("Created maintenance request #%s for unit %s from schedule %s", request.id, unit_id, schedule.id)
          return request

     def create_confirmed_for_unit(
          self,
          schedule: MaintenanceSchedule,
          unit_id: int,
          explicit_time: Optional[str] = None,
     ) -> MaintenanceRequest:
          return self.create_for_unit(
               schedule,
               unit_id,
               preferred_time=explicit_time or default_unit_time(schedule),
               status=RequestStatus.IN_PROGRESS,
          )
