# schemas/maintenance_request.py
"""
Pydantic schemas for Maintenance Request API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models import MaintenanceCategory, MaintenancePriority, RequestStatus, Urgency
from services.time_slots import TIME_SLOTS


class MaintenanceRequestCreate(BaseModel):
     """Schema for a tenant-initiated maintenance request."""
     unit_id: int = Field(..., gt=0, description="Unit ID (must exist)")
     tenant_id: Optional[int] = Field(None, gt=0, description="Defaults to the unit's current tenant")
     title: str = Field(..., min_length=1, max_length=200)
     description: Optional[str] = None
     category: MaintenanceCategory = MaintenanceCategory.OTHER
     priority: MaintenancePriority = MaintenancePriority.MEDIUM
     urgency: Urgency = Urgency.MEDIUM
     preferred_time: Optional[str] = Field(None, max_length=100)
     estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 12,
                    "title": "Leaking kitchen faucet",
                    "category": "PLUMBING",
                    "priority": "HIGH",
                    "urgency": "HIGH",
                    "preferred_time": "2026-10-20T10:00:00"
               }
          }
     )


class StatusUpdate(BaseModel):
     status: RequestStatus
     notes: Optional[str] = None


class CompleteRequest(BaseModel):
     completion_notes: Optional[str] = None
     actual_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class RejectRequest(BaseModel):
     reason: Optional[str] = None


class AssignRequest(BaseModel):
     assigned_to_user_id: int = Field(..., gt=0)


class TimeSlotSelection(BaseModel):
     """Tenant's confirmed slot for a schedule-origin request."""
     preferred_date: date
     preferred_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "preferred_date": "2026-11-15",
                    "preferred_time": TIME_SLOTS[1]
               }
          }
     )


class TimeSlotResponse(BaseModel):
     time_slot: str
     preferred_date_time: str
     available: bool


class MaintenanceRequestResponse(BaseModel):
     """Schema for maintenance request response."""
     id: int
     tenant_id: Optional[int] = None
     unit_id: Optional[int] = None
     title: str
     description: Optional[str] = None
     category: MaintenanceCategory
     priority: MaintenancePriority
     urgency: Urgency
     preferred_time: Optional[str] = None
     status: RequestStatus
     assigned_to_user_id: Optional[int] = None
     estimated_cost: Optional[Decimal] = None
     actual_cost: Optional[Decimal] = None
     completion_notes: Optional[str] = None
     submitted_date: Optional[datetime] = None
     completed_date: Optional[datetime] = None
     created_by_user_id: Optional[int] = None
     schedule_id: Optional[int] = None
     is_from_schedule: bool = False

     model_config = ConfigDict(from_attributes=True)
