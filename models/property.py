# models/property.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Property(Base):
     """
     Property model - the building that owns a set of units.
     Maps to existing 'properties' table in the database.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_name = Column(String(255), nullable=False)
     description = Column(Text, nullable=True)
     city = Column(String(100), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     property_units = relationship("PropertyUnit", back_populates="property", cascade="all, delete-orphan")
     leases = relationship("Lease", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.property_name}')>"
