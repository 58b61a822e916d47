# routers/errors.py
"""
Translate service-layer errors into HTTP responses.

Usage:
     with http_errors():
          schedule = service.pause(schedule_id, user_id)
"""
from contextlib import contextmanager

from fastapi import HTTPException, status

from services.exceptions import InvalidStateError, NotFoundError


@contextmanager
def http_errors():
     try:
          yield
     except NotFoundError as e:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
     except InvalidStateError as e:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
