# routers/maintenance_schedules.py
"""
Maintenance Schedule API routes for CondoEase backend.

Recurring maintenance rules: CRUD, lifecycle transitions (activate,
deactivate, pause, resume), manual triggers and a read-only preview of the
units a trigger would reach.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from routers.errors import http_errors
from services.schedule_service import MaintenanceScheduleService
from schemas.maintenance_schedule import (
     ScheduleCreate,
     ScheduleUpdate,
     ScheduleResponse,
     AffectedUnitResponse,
     TriggerResponse,
     TriggerUnitRequest,
)
from schemas.maintenance_request import MaintenanceRequestResponse
from schemas.maintenance_log import MaintenanceLogResponse

router = APIRouter(prefix="/api/maintenance/schedules", tags=["maintenance-schedules"])


def get_schedule_service(db: Session = Depends(get_session)) -> MaintenanceScheduleService:
     return MaintenanceScheduleService(db)


@router.get("", response_model=List[ScheduleResponse], summary="List active schedules")
def list_active_schedules(
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     """Active schedules ordered by next trigger date."""
     return service.list_active_schedules()


@router.get("/{schedule_id}", response_model=ScheduleResponse, summary="Get a schedule")
def get_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.get_schedule(schedule_id)


@router.post(
     "",
     response_model=ScheduleResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a maintenance schedule"
)
def create_schedule(
     schedule_data: ScheduleCreate,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     """
     Create a recurring maintenance schedule.

     - **recurrence_type**: ONE_TIME, DAILY, WEEKLY, MONTHLY, QUARTERLY or YEARLY
     - **target_type**: ALL_UNITS, SPECIFIC_UNITS, FLOOR or UNIT_TYPE
     - **target_units**: id list, floor number or unit type, depending on target_type

     A schedule whose start date is today or earlier fires immediately.
     """
     with http_errors():
          return service.create_schedule(schedule_data.to_fields(), user_id)


@router.put("/{schedule_id}", response_model=ScheduleResponse, summary="Update a schedule")
def update_schedule(
     schedule_id: int,
     schedule_data: ScheduleUpdate,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.update_schedule(schedule_id, schedule_data.to_fields(exclude_unset=True), user_id)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a schedule")
def delete_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     """Work items already created keep their schedule reference; logs are kept."""
     with http_errors():
          service.delete_schedule(schedule_id, user_id)


@router.post("/{schedule_id}/activate", response_model=ScheduleResponse)
def activate_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.activate(schedule_id, user_id)


@router.post("/{schedule_id}/deactivate", response_model=ScheduleResponse)
def deactivate_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.deactivate(schedule_id, user_id)


@router.post("/{schedule_id}/pause", response_model=ScheduleResponse)
def pause_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.pause(schedule_id, user_id)


@router.post("/{schedule_id}/resume", response_model=ScheduleResponse)
def resume_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.resume(schedule_id, user_id)


@router.post("/{schedule_id}/trigger", response_model=TriggerResponse, summary="Trigger a schedule now")
def trigger_schedule(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     """Create one work item per occupied target unit and advance the schedule."""
     with http_errors():
          return service.trigger(schedule_id, user_id=user_id)


@router.post(
     "/{schedule_id}/trigger-unit",
     response_model=MaintenanceRequestResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Trigger a schedule for one unit"
)
def trigger_schedule_for_unit(
     schedule_id: int,
     body: TriggerUnitRequest,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.trigger_for_unit(schedule_id, body.unit_id, body.preferred_date_time, user_id)


@router.get("/{schedule_id}/affected-units", response_model=List[AffectedUnitResponse])
def get_affected_units(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     """Units, tenants and proposed slots for the next trigger. Nothing is saved."""
     with http_errors():
          return service.get_affected_units_preview(schedule_id)


@router.get("/{schedule_id}/logs", response_model=List[MaintenanceLogResponse])
def get_schedule_logs(
     schedule_id: int,
     service: MaintenanceScheduleService = Depends(get_schedule_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.logs_for_schedule(schedule_id)
