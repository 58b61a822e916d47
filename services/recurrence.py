# services/recurrence.py
"""
Recurrence calculator - pure date arithmetic for maintenance schedules.

Nothing here touches the database: callers pass the schedule's recurrence
settings and get back the next trigger date.
"""
from datetime import date, timedelta
from typing import Optional
from calendar import monthrange

from dateutil.relativedelta import relativedelta

from models.maintenance_schedule import RecurrenceType


def _clamp_to_end(candidate: date, end_date: Optional[date]) -> date:
     # A schedule that would overshoot its end date fires once more on the end date
     if end_date is not None and candidate > end_date:
          return end_date
     return candidate


def calculate_next_trigger_date(
     recurrence_type,
     recurrence_interval: Optional[int],
     start_date: Optional[date],
     last_triggered_date: Optional[date] = None,
     end_date: Optional[date] = None,
     day_of_month: Optional[int] = None,
     today: Optional[date] = None,
) -> date:
     """
     Compute the next trigger date of a schedule.

     The base date is the last trigger date, else the start date, else today.
     ONE_TIME schedules always answer their start date. Unknown recurrence
     types advance by one day. Results past end_date are clamped to end_date.

     Args:
          recurrence_type: RecurrenceType (or its string value)
          recurrence_interval: Positive multiplier, treated as 1 when missing
          start_date: Schedule start date
          last_triggered_date: Date the schedule last fired, if ever
          end_date: Optional inclusive end date
          day_of_month: Optional monthly anchor (1-31)
          today: Fallback base date (defaults to date.today())

     Returns:
          The next trigger date
     """
     base = last_triggered_date or start_date or today or date.today()
     interval = recurrence_interval if recurrence_interval and recurrence_interval > 0 else 1

     try:
          recurrence = RecurrenceType(recurrence_type)
     except ValueError:
          recurrence = None

     if recurrence == RecurrenceType.ONE_TIME:
          next_date = start_date or base
     elif recurrence == RecurrenceType.DAILY:
          next_date = base + timedelta(days=interval)
     elif recurrence == RecurrenceType.WEEKLY:
          next_date = base + timedelta(weeks=interval)
     elif recurrence == RecurrenceType.MONTHLY:
          next_date = base + relativedelta(months=interval)
          if day_of_month:
               last_day = monthrange(next_date.year, next_date.month)[1]
               next_date = next_date.replace(day=min(day_of_month, last_day))
     elif recurrence == RecurrenceType.QUARTERLY:
          next_date = base + relativedelta(months=3 * interval)
     elif recurrence == RecurrenceType.YEARLY:
          next_date = base + relativedelta(years=interval)
     else:
          next_date = base + timedelta(days=1)

     return _clamp_to_end(next_date, end_date)


def first_trigger_date(
     start_date: Optional[date],
     end_date: Optional[date] = None,
     today: Optional[date] = None,
) -> date:
     """A schedule that has never fired first fires on its start date."""
     return _clamp_to_end(start_date or today or date.today(), end_date)


def next_trigger_for(schedule, today: Optional[date] = None) -> date:
     """Next trigger date for a MaintenanceSchedule row (or anything shaped like one)."""
     if schedule.last_triggered_date is None:
          return first_trigger_date(schedule.start_date, schedule.end_date, today)
     return calculate_next_trigger_date(
          schedule.recurrence_type,
          schedule.recurrence_interval,
          schedule.start_date,
          last_triggered_date=schedule.last_triggered_date,
          end_date=schedule.end_date,
          day_of_month=schedule.recurrence_day_of_month,
          today=today,
     )


def is_pending(schedule) -> bool:
     """
     True while the schedule still owes a run for its current next_trigger_date.

     Once a schedule has fired on its next_trigger_date (one-time schedules,
     or recurring ones pinned to their end date) it is no longer pending.
     """
     if schedule.next_trigger_date is None:
          return False
     if schedule.last_triggered_date is None:
          return True
     return schedule.last_triggered_date < schedule.next_trigger_date


def is_due(schedule, today: date) -> bool:
     """Selection rule used by the periodic sweep."""
     if not schedule.is_active or schedule.is_paused:
          return False
     if not is_pending(schedule) or schedule.next_trigger_date > today:
          return False
     return schedule.end_date is None or today <= schedule.end_date
