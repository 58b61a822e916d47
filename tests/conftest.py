# tests/conftest.py
import os

# In-memory database and a fixed JWT secret before any app module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["MAINTENANCE_EMAIL_ENABLED"] = "false"

from datetime import date, datetime  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from database import build_engine, init_db  # noqa: E402
from models import (  # noqa: E402
     Lease,
     LeaseStatus,
     MaintenanceCategory,
     MaintenancePriority,
     Property,
     PropertyUnit,
     RecurrenceType,
     TargetType,
     Tenant,
     User,
)

TODAY = date(2025, 1, 15)
NOW = datetime(2025, 1, 15, 9, 30)


@pytest.fixture
def engine():
     engine = build_engine("sqlite://")
     init_db(engine)
     yield engine
     engine.dispose()


@pytest.fixture
def db(engine):
     session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
     yield session
     session.close()


@pytest.fixture
def admin(db):
     user = User(email="admin@condoease.test", first_name="Ada", last_name="Admin", role="admin")
     db.add(user)
     db.commit()
     return user


@pytest.fixture
def staff(db):
     user = User(email="fixit@condoease.test", first_name="Felix", last_name="Fixit", role="staff")
     db.add(user)
     db.commit()
     return user


def add_unit(db, building, unit_number, floor, unit_type="studio"):
     unit = PropertyUnit(property_id=building.id, unit_number=unit_number, floor=floor, unit_type=unit_type)
     db.add(unit)
     db.flush()
     return unit


def occupy(db, unit, first_name, last_name, email, with_user=True, lease_status=LeaseStatus.ACTIVE):
     """Lease `unit` to a new tenant; returns (tenant, user or None)."""
     user = None
     if with_user:
          user = User(email=email, first_name=first_name, last_name=last_name, role="tenant")
          db.add(user)
          db.flush()
     tenant = Tenant(
          first_name=first_name,
          last_name=last_name,
          email=email,
          user_id=user.id if user else None,
     )
     db.add(tenant)
     db.flush()
     db.add(
          Lease(
               property_id=unit.property_id,
               property_unit_id=unit.id,
               tenant_id=tenant.tenant_id,
               rent_price=15000,
               start_date=date(2024, 6, 1),
               end_date=date(2025, 6, 1),
               status=lease_status,
          )
     )
     db.flush()
     return tenant, user


@pytest.fixture
def building(db):
     """
     Five units; 101, 102 and 201 are occupied, 202 had its lease terminated
     and 301 was never leased.
     """
     prop = Property(property_name="Sampaguita Residences", city="Makati")
     db.add(prop)
     db.flush()

     units = [
          add_unit(db, prop, "101", 1, "studio"),
          add_unit(db, prop, "102", 1, "studio"),
          add_unit(db, prop, "201", 2, "1BR"),
          add_unit(db, prop, "202", 2, "1BR"),
          add_unit(db, prop, "301", 3, "2BR"),
     ]
     occupy(db, units[0], "Juan", "Dela Cruz", "juan@condoease.test")
     occupy(db, units[1], "Maria", "Santos", "maria@condoease.test")
     occupy(db, units[2], "Pedro", "Reyes", "pedro@condoease.test", with_user=False)
     occupy(db, units[3], "Ana", "Lopez", "ana@condoease.test", lease_status=LeaseStatus.TERMINATED)
     db.commit()
     return SimpleNamespace(property=prop, units=units, occupied=[u.id for u in units[:3]])


def tenant_user(db, email):
     return db.query(User).filter(User.email == email).one()


def schedule_data(**overrides):
     data = {
          "title": "Aircon filter cleaning",
          "description": "Clean and inspect split-type aircon filters",
          "category": MaintenanceCategory.HVAC,
          "recurrence_type": RecurrenceType.MONTHLY,
          "recurrence_interval": 1,
          "recurrence_day_of_month": 15,
          "target_type": TargetType.ALL_UNITS,
          "target_units": None,
          "start_date": date(2025, 2, 15),
          "estimated_cost": 1500,
          "priority": MaintenancePriority.MEDIUM,
     }
     data.update(overrides)
     return data
