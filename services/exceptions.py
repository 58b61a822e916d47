# services/exceptions.py
"""
Service-layer errors for the maintenance engine.

Routers translate these into HTTP responses; the periodic jobs log them.
"""


class MaintenanceError(Exception):
     """Base class for maintenance service errors."""


class NotFoundError(MaintenanceError):
     """A schedule, request, unit, notification or user id does not exist."""

     def __init__(self, entity: str, entity_id):
          self.entity = entity
          self.entity_id = entity_id
          super().__init__(f"{entity} with ID {entity_id} not found")


class InvalidStateError(MaintenanceError):
     """The requested transition is not allowed from the current state."""
