# models/tenant.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Tenant(Base):
     """
     Tenant model - occupant profile linked to a lease.
     Maps to existing 'tenants' table in the database.

     The scheduler only reads names and email from here; the email is what
     maps an occupant to a notifiable user account.
     """
     __tablename__ = "tenants"

     tenant_id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)

     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     email = Column(String(255), nullable=True, index=True)
     contact_number = Column(String(50), nullable=True)

     status = Column(String(50), default="approved", nullable=False)  # pending, approved, denied

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     user = relationship("User", back_populates="tenant")
     leases = relationship("Lease", back_populates="tenant")

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}".strip()

     def __repr__(self):
          return f"<Tenant(tenant_id={self.tenant_id}, name='{self.first_name} {self.last_name}')>"
