# models/lease.py
import enum
from sqlalchemy import Column, Integer, Numeric, Date, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class LeaseStatus(str, enum.Enum):
     """Lease lifecycle. Only ACTIVE leases make a unit occupied."""
     PENDING = "PENDING"
     ACTIVE = "ACTIVE"
     EXPIRED = "EXPIRED"
     TERMINATED = "TERMINATED"


class Lease(Base):
     """
     Lease model - rental agreements between tenants and units.
     Maps to existing 'leases' table in the database.
     """
     __tablename__ = "leases"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=True)
     property_unit_id = Column(Integer, ForeignKey("property_units.id"), nullable=True, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.tenant_id"), nullable=False)

     rent_price = Column(Numeric(12, 2), nullable=True)
     start_date = Column(Date, nullable=True)
     end_date = Column(Date, nullable=True)
     status = Column(
          Enum(LeaseStatus, name="lease_status", create_constraint=True),
          default=LeaseStatus.ACTIVE,
          nullable=False,
          index=True
     )

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="leases")
     property_unit = relationship("PropertyUnit", back_populates="leases")
     tenant = relationship("Tenant", back_populates="leases")

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, unit_id={self.property_unit_id}, status='{self.status.value}')>"
