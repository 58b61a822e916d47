# scheduler.py
"""
Periodic maintenance jobs (APScheduler).

Jobs (server local time unless SCHEDULER_TIMEZONE is set):
- 06:00 daily   trigger due maintenance schedules
- 08:00 daily   upcoming maintenance reminders
- 10:00 daily   overdue maintenance reminders
- 02:00 Sunday  delete read notifications older than NOTIFICATION_RETENTION_DAYS

Each job opens its own session and never raises; failures only reach the log.

Usage:
     from scheduler import start_scheduler, shutdown_scheduler

     scheduler = start_scheduler()
     ...
     shutdown_scheduler(scheduler)
"""
import logging
import os
from datetime import date
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv

from database import get_session_context
from services.notification_service import NotificationService
from services.schedule_service import MaintenanceScheduleService

load_dotenv()

logger = logging.getLogger(__name__)

SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE") or None
TRIGGER_HOUR = int(os.getenv("MAINTENANCE_TRIGGER_HOUR", "6"))
REMINDER_HOUR = int(os.getenv("MAINTENANCE_REMINDER_HOUR", "8"))
OVERDUE_HOUR = int(os.getenv("MAINTENANCE_OVERDUE_HOUR", "10"))
NOTIFICATION_RETENTION_DAYS = int(os.getenv("NOTIFICATION_RETENTION_DAYS", "30"))


def check_and_trigger_schedules(session_factory: Callable = get_session_context, today: Optional[date] = None) -> None:
     logger.info("=== Starting scheduled maintenance check ===")
     try:
          with session_factory() as db:
               results = MaintenanceScheduleService(db).evaluate_due_schedules(today)
          created = sum(len(result.created_request_ids) for result in results)
          errors = sum(result.errors for result in results)
          logger.info(
               "=== Completed scheduled maintenance check: %d schedules, %d requests, %d errors ===",
               len(results),
               created,
               errors,
          )
     except Exception:
          logger.exception("Error in scheduled maintenance check")


def send_upcoming_maintenance_notifications(session_factory: Callable = get_session_context, today: Optional[date] = None) -> None:
     logger.info("=== Starting upcoming maintenance notifications ===")
     try:
          with session_factory() as db:
               sent = MaintenanceScheduleService(db).send_upcoming_notifications(today)
          logger.info("=== Completed upcoming maintenance notifications: %d sent ===", sent)
     except Exception:
          logger.exception("Error sending upcoming maintenance notifications")


def check_overdue_schedules(session_factory: Callable = get_session_context, today: Optional[date] = None) -> None:
     logger.info("=== Starting overdue maintenance check ===")
     try:
          with session_factory() as db:
               sent = MaintenanceScheduleService(db).check_overdue_schedules(today)
          logger.info("=== Completed overdue maintenance check: %d sent ===", sent)
     except Exception:
          logger.exception("Error checking overdue schedules")


def cleanup_old_notifications(session_factory: Callable = get_session_context, days_old: int = NOTIFICATION_RETENTION_DAYS) -> None:
     logger.info("=== Starting notification cleanup ===")
     try:
          with session_factory() as db:
               NotificationService(db).delete_old_read_notifications(days_old)
          logger.info("=== Completed notification cleanup ===")
     except Exception:
          logger.exception("Error cleaning up old notifications")


def build_scheduler(timezone: Optional[str] = SCHEDULER_TIMEZONE) -> BackgroundScheduler:
     """Scheduler with the four maintenance jobs registered (not started)."""
     scheduler = BackgroundScheduler(timezone=timezone) if timezone else BackgroundScheduler()

     jobs = (
          ("maintenance_trigger_schedules", check_and_trigger_schedules, {"hour": TRIGGER_HOUR, "minute": 0}),
          ("maintenance_upcoming_notifications", send_upcoming_maintenance_notifications, {"hour": REMINDER_HOUR, "minute": 0}),
          ("maintenance_overdue_check", check_overdue_schedules, {"hour": OVERDUE_HOUR, "minute": 0}),
          ("maintenance_notification_cleanup", cleanup_old_notifications, {"day_of_week": "sun", "hour": 2, "minute": 0}),
     )
     for job_id, func, cron in jobs:
          scheduler.add_job(
               func,
               "cron",
               id=job_id,
               replace_existing=True,
               coalesce=True,
               max_instances=1,
               **cron,
          )
     return scheduler


def start_scheduler() -> BackgroundScheduler:
     scheduler = build_scheduler()
     scheduler.start()
     logger.info("Maintenance scheduler started with %d jobs", len(scheduler.get_jobs()))
     return scheduler


def shutdown_scheduler(scheduler: Optional[BackgroundScheduler]) -> None:
     if scheduler is not None and scheduler.running:
          scheduler.shutdown(wait=False)
          logger.info("Maintenance scheduler stopped")
