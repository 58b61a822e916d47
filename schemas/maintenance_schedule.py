# schemas/maintenance_schedule.py
"""
Pydantic schemas for Maintenance Schedule API request/response validation.

target_units is stored as opaque text: a JSON id list for SPECIFIC_UNITS,
a floor number for FLOOR, a type string for UNIT_TYPE. Lists and numbers
sent by clients are normalized to that text form here.
"""
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models import MaintenanceCategory, MaintenancePriority, RecurrenceType, ScheduleState, TargetType


def _target_payload_to_text(value: Any) -> Optional[str]:
     if value is None or isinstance(value, str):
          return value
     if isinstance(value, (list, tuple)):
          return json.dumps(list(value))
     return str(value)


class _ScheduleFields(BaseModel):

     @field_validator("target_units", mode="before", check_fields=False)
     @classmethod
     def normalize_target_units(cls, value):
          return _target_payload_to_text(value)

     def to_fields(self, exclude_unset: bool = False) -> Dict[str, Any]:
          """Column values for the service layer (notify_users as JSON text)."""
          data = self.model_dump(exclude_unset=exclude_unset)
          if "notify_users" in data:
               users = data["notify_users"]
               data["notify_users"] = json.dumps(users) if users is not None else None
          return data


class ScheduleCreate(_ScheduleFields):
     """Schema for creating a new maintenance schedule."""
     title: str = Field(..., min_length=1, max_length=200)
     description: Optional[str] = None
     category: MaintenanceCategory = MaintenanceCategory.OTHER
     recurrence_type: RecurrenceType = RecurrenceType.ONE_TIME
     recurrence_interval: int = Field(default=1, ge=1)
     recurrence_day_of_week: Optional[int] = Field(None, ge=0, le=6)
     recurrence_day_of_month: Optional[int] = Field(None, ge=1, le=31)
     target_type: TargetType = TargetType.ALL_UNITS
     target_units: Optional[str] = Field(None, description="JSON id list, floor number or unit type")
     start_date: date
     end_date: Optional[date] = None
     notify_days_before: int = Field(default=3, ge=0)
     notify_users: Optional[List[int]] = None
     estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
     assigned_to_user_id: Optional[int] = None
     priority: MaintenancePriority = MaintenancePriority.MEDIUM
     is_active: bool = True

     @model_validator(mode="after")
     def check_dates(self):
          if self.end_date is not None and self.end_date < self.start_date:
               raise ValueError("end_date cannot be before start_date")
          return self

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "title": "Aircon filter cleaning",
                    "category": "HVAC",
                    "recurrence_type": "MONTHLY",
                    "recurrence_interval": 1,
                    "recurrence_day_of_month": 15,
                    "target_type": "FLOOR",
                    "target_units": "3",
                    "start_date": "2026-11-15",
                    "notify_days_before": 3,
                    "notify_users": [1],
                    "estimated_cost": 500.00,
                    "priority": "MEDIUM"
               }
          }
     )


class ScheduleUpdate(_ScheduleFields):
     """Schema for updating a schedule; only the fields sent are changed."""
     title: Optional[str] = Field(None, min_length=1, max_length=200)
     description: Optional[str] = None
     category: Optional[MaintenanceCategory] = None
     recurrence_type: Optional[RecurrenceType] = None
     recurrence_interval: Optional[int] = Field(None, ge=1)
     recurrence_day_of_week: Optional[int] = Field(None, ge=0, le=6)
     recurrence_day_of_month: Optional[int] = Field(None, ge=1, le=31)
     target_type: Optional[TargetType] = None
     target_units: Optional[str] = None
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     notify_days_before: Optional[int] = Field(None, ge=0)
     notify_users: Optional[List[int]] = None
     estimated_cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
     assigned_to_user_id: Optional[int] = None
     priority: Optional[MaintenancePriority] = None

     # Omit these to leave them unchanged; the columns are NOT NULL
     @field_validator(
          "title",
          "category",
          "recurrence_type",
          "recurrence_interval",
          "target_type",
          "start_date",
          "priority",
          mode="before",
     )
     @classmethod
     def reject_null(cls, value, info):
          if value is None:
               raise ValueError(f"{info.field_name} cannot be null")
          return value

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "title": "Aircon filter cleaning (all floors)",
                    "target_type": "ALL_UNITS"
               }
          }
     )


class ScheduleResponse(BaseModel):
     """Schema for maintenance schedule response."""
     id: int
     title: str
     description: Optional[str] = None
     category: MaintenanceCategory
     recurrence_type: RecurrenceType
     recurrence_interval: int
     recurrence_day_of_week: Optional[int] = None
     recurrence_day_of_month: Optional[int] = None
     target_type: TargetType
     target_units: Optional[str] = None
     start_date: date
     end_date: Optional[date] = None
     next_trigger_date: date
     last_triggered_date: Optional[date] = None
     notify_days_before: Optional[int] = None
     notify_users: List[int] = []
     estimated_cost: Optional[Decimal] = None
     assigned_to_user_id: Optional[int] = None
     priority: MaintenancePriority
     is_active: bool
     is_paused: bool
     state: ScheduleState
     created_by_user_id: Optional[int] = None
     created_at: Optional[datetime] = None
     updated_at: Optional[datetime] = None

     @field_validator("notify_users", mode="before")
     @classmethod
     def parse_notify_users(cls, value):
          if value is None or value == "":
               return []
          if isinstance(value, str):
               try:
                    parsed = json.loads(value)
               except ValueError:
                    return []
               return parsed if isinstance(parsed, list) else []
          return value

     model_config = ConfigDict(from_attributes=True)


class AffectedUnitResponse(BaseModel):
     """One row of the affected-units preview."""
     unit_id: int
     unit_number: Optional[str] = None
     floor: Optional[int] = None
     tenant_name: Optional[str] = None
     tenant_email: Optional[str] = None
     preferred_date_time: str
     has_conflict: bool

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "unit_id": 12,
                    "unit_number": "301",
                    "floor": 3,
                    "tenant_name": "Juan Dela Cruz",
                    "tenant_email": "juan@example.com",
                    "preferred_date_time": "2026-11-15T09:00:00",
                    "has_conflict": False
               }
          }
     )


class TriggerResponse(BaseModel):
     """Outcome of a manual trigger."""
     schedule_id: int
     triggered: bool
     target_unit_ids: List[int] = []
     created_request_ids: List[int] = []
     errors: int = 0
     skipped_reason: Optional[str] = None
     last_triggered_date: Optional[date] = None
     next_trigger_date: Optional[date] = None

     model_config = ConfigDict(from_attributes=True)


class TriggerUnitRequest(BaseModel):
     """Body of a single-unit trigger."""
     unit_id: int = Field(..., gt=0)
     preferred_date_time: Optional[str] = Field(None, max_length=100, description="Defaults to <next trigger date>T09:00:00")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 12,
                    "preferred_date_time": "2026-11-15T10:00:00"
               }
          }
     )
