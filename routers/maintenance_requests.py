# routers/maintenance_requests.py
"""
Maintenance Request API routes for CondoEase backend.

Work items: tenant-initiated creation, status transitions, assignment,
and the tenant's time-slot confirmation for schedule-created items.
"""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from routers.errors import http_errors
from services.maintenance_request_service import MaintenanceRequestService
from schemas.maintenance_request import (
     MaintenanceRequestCreate,
     MaintenanceRequestResponse,
     StatusUpdate,
     CompleteRequest,
     RejectRequest,
     AssignRequest,
     TimeSlotSelection,
     TimeSlotResponse,
)

router = APIRouter(prefix="/api/maintenance-requests", tags=["maintenance-requests"])


def get_request_service(db: Session = Depends(get_session)) -> MaintenanceRequestService:
     return MaintenanceRequestService(db)


@router.post(
     "",
     response_model=MaintenanceRequestResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Submit a maintenance request"
)
def create_request(
     request_data: MaintenanceRequestCreate,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.create_request(request_data.model_dump(), user_id)


# Declared before /{request_id} so the path is not parsed as an id
@router.get("/available-slots", response_model=List[TimeSlotResponse])
def get_available_slots(
     unit_id: int = Query(..., gt=0),
     target_date: date = Query(..., alias="date"),
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     """Hourly slots (09:00 - 17:00) of a day with their booked flag for one unit."""
     with http_errors():
          return service.available_slots(unit_id, target_date)


@router.get("/unit/{unit_id}", response_model=List[MaintenanceRequestResponse])
def list_requests_by_unit(
     unit_id: int,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     return service.list_by_unit(unit_id)


@router.get("/{request_id}", response_model=MaintenanceRequestResponse)
def get_request(
     request_id: int,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.get_request(request_id)


@router.put("/{request_id}/status", response_model=MaintenanceRequestResponse)
def update_request_status(
     request_id: int,
     body: StatusUpdate,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.update_status(request_id, body.status, body.notes, user_id)


@router.put("/{request_id}/complete", response_model=MaintenanceRequestResponse)
def complete_request(
     request_id: int,
     body: CompleteRequest,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.complete_request(request_id, body.completion_notes, body.actual_cost, user_id)


@router.put("/{request_id}/reject", response_model=MaintenanceRequestResponse)
def reject_request(
     request_id: int,
     body: RejectRequest,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.reject_request(request_id, body.reason, user_id)


@router.put("/{request_id}/assign", response_model=MaintenanceRequestResponse)
def assign_request(
     request_id: int,
     body: AssignRequest,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.assign_request(request_id, body.assigned_to_user_id, user_id)


@router.put("/{request_id}/select-time", response_model=MaintenanceRequestResponse)
def select_time_slot(
     request_id: int,
     body: TimeSlotSelection,
     service: MaintenanceRequestService = Depends(get_request_service),
     user_id: int = Depends(get_current_user_id)
):
     """Tenant confirms a slot; only PENDING_TENANT_CONFIRMATION requests accept one."""
     with http_errors():
          return service.select_time_slot(request_id, body.preferred_date, body.preferred_time, user_id)
