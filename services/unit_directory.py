# services/unit_directory.py
"""
Unit / occupancy / user directory used by the maintenance engine.

The scheduler only needs a narrow read view of the property data:
which units exist (optionally by floor or type), which of them are
occupied through an ACTIVE lease, who the current tenant is, which user
account belongs to a tenant's email, and which work items already exist
for a unit. UnitDirectory answers those questions from the ORM.
"""
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from models import Lease, LeaseStatus, MaintenanceRequest, PropertyUnit, Tenant, User


@dataclass
class TenantInfo:
     """Current occupant of a unit."""
     tenant_id: int
     first_name: str
     last_name: str
     email: Optional[str]

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}".strip()


class UnitDirectory:
     """Read-only lookups over units, leases, tenants, users and work items."""

     def __init__(self, db: Session):
          self.db = db

     def get_unit(self, unit_id: int) -> Optional[PropertyUnit]:
          return self.db.get(PropertyUnit, unit_id)

     def list_unit_ids(self, floor: Optional[int] = None, unit_type: Optional[str] = None) -> List[int]:
          query = self.db.query(PropertyUnit.id)
          if floor is not None:
               query = query.filter(PropertyUnit.floor == floor)
          if unit_type is not None:
               query = query.filter(PropertyUnit.unit_type == unit_type)
          return [row[0] for row in query.order_by(PropertyUnit.id).all()]

     def _active_lease(self, unit_id: int) -> Optional[Lease]:
          return (
               self.db.query(Lease)
               .filter(Lease.property_unit_id == unit_id, Lease.status == LeaseStatus.ACTIVE)
               .order_by(Lease.id.desc())
               .first()
          )

     def is_occupied(self, unit_id: int) -> bool:
          return self._active_lease(unit_id) is not None

     def current_tenant(self, unit_id: int) -> Optional[TenantInfo]:
          lease = self._active_lease(unit_id)
          if lease is None or lease.tenant is None:
               return None
          tenant: Tenant = lease.tenant
          return TenantInfo(
               tenant_id=tenant.tenant_id,
               first_name=tenant.first_name,
               last_name=tenant.last_name,
               email=tenant.email,
          )

     def resolve_user_by_email(self, email: Optional[str]) -> Optional[int]:
          if not email:
               return None
          user = self.db.query(User).filter(User.email == email).first()
          return user.id if user else None

     def user_exists(self, user_id: Optional[int]) -> bool:
          return user_id is not None and self.db.get(User, user_id) is not None

     def list_work_items(self, unit_id: int, date_substring: Optional[str] = None) -> List[MaintenanceRequest]:
          query = self.db.query(MaintenanceRequest).filter(MaintenanceRequest.unit_id == unit_id)
          if date_substring:
               query = query.filter(MaintenanceRequest.preferred_time.contains(date_substring))
          return query.order_by(MaintenanceRequest.id).all()
