# routers/maintenance_logs.py
"""
Read-only access to the maintenance audit trail.
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from services.maintenance_log_service import MaintenanceLogService
from schemas.maintenance_log import MaintenanceLogResponse

router = APIRouter(prefix="/api/maintenance/logs", tags=["maintenance-logs"])


@router.get("", response_model=List[MaintenanceLogResponse], summary="Most recent log entries")
def get_recent_logs(
     limit: int = Query(100, ge=1, le=500),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return MaintenanceLogService(db).recent_logs(limit)


@router.get("/request/{request_id}", response_model=List[MaintenanceLogResponse])
def get_request_logs(
     request_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return MaintenanceLogService(db).logs_for_request(request_id)
