# routers/maintenance_notifications.py
"""
Maintenance notification inbox of the calling user.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from routers.errors import http_errors
from services.notification_service import NotificationService
from schemas.maintenance_notification import NotificationResponse, UnreadCountResponse

router = APIRouter(prefix="/api/maintenance/notifications", tags=["maintenance-notifications"])


def get_notification_service(db: Session = Depends(get_session)) -> NotificationService:
     return NotificationService(db)


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
     service: NotificationService = Depends(get_notification_service),
     user_id: int = Depends(get_current_user_id)
):
     return service.list_for_user(user_id)


@router.get("/unread", response_model=List[NotificationResponse])
def list_unread_notifications(
     service: NotificationService = Depends(get_notification_service),
     user_id: int = Depends(get_current_user_id)
):
     return service.list_for_user(user_id, unread_only=True)


@router.get("/unread/count", response_model=UnreadCountResponse)
def count_unread_notifications(
     service: NotificationService = Depends(get_notification_service),
     user_id: int = Depends(get_current_user_id)
):
     return {"count": service.count_unread(user_id)}


@router.put("/read-all")
def mark_all_notifications_read(
     service: NotificationService = Depends(get_notification_service),
     user_id: int = Depends(get_current_user_id)
):
     return {"updated": service.mark_all_as_read(user_id)}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
     notification_id: int,
     service: NotificationService = Depends(get_notification_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          return service.mark_as_read(notification_id, user_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
     notification_id: int,
     service: NotificationService = Depends(get_notification_service),
     user_id: int = Depends(get_current_user_id)
):
     with http_errors():
          service.delete_notification(notification_id, user_id)
