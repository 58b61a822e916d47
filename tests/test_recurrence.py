# tests/test_recurrence.py
from datetime import date
from types import SimpleNamespace

import pytest

from models import RecurrenceType
from services.recurrence import (
     calculate_next_trigger_date,
     first_trigger_date,
     is_due,
     is_pending,
     next_trigger_for,
)

START = date(2025, 1, 15)


@pytest.mark.parametrize(
     "recurrence, interval, expected",
     [
          (RecurrenceType.DAILY, 3, date(2025, 1, 18)),
          (RecurrenceType.WEEKLY, 2, date(2025, 1, 29)),
          (RecurrenceType.MONTHLY, 1, date(2025, 2, 15)),
          (RecurrenceType.QUARTERLY, 1, date(2025, 4, 15)),
          (RecurrenceType.YEARLY, 1, date(2026, 1, 15)),
     ],
)
def test_advances_from_last_trigger(recurrence, interval, expected):
     assert calculate_next_trigger_date(recurrence, interval, date(2024, 1, 1), last_triggered_date=START) == expected


@pytest.mark.parametrize(
     "recurrence",
     [RecurrenceType.DAILY, RecurrenceType.WEEKLY, RecurrenceType.MONTHLY, RecurrenceType.QUARTERLY, RecurrenceType.YEARLY],
)
def test_next_date_is_strictly_after_base(recurrence):
     for base in (date(2024, 2, 29), date(2025, 1, 31), date(2025, 12, 31)):
          assert calculate_next_trigger_date(recurrence, 1, base, last_triggered_date=base) > base


def test_one_time_always_answers_start_date():
     assert calculate_next_trigger_date(RecurrenceType.ONE_TIME, 1, START) == START
     assert calculate_next_trigger_date(RecurrenceType.ONE_TIME, 5, START, last_triggered_date=date(2025, 3, 1)) == START


def test_monthly_anchor_31_clamps_to_end_of_february():
     assert calculate_next_trigger_date(
          RecurrenceType.MONTHLY, 1, date(2025, 1, 31), last_triggered_date=date(2025, 1, 31), day_of_month=31
     ) == date(2025, 2, 28)
     assert calculate_next_trigger_date(
          RecurrenceType.MONTHLY, 1, date(2024, 1, 31), last_triggered_date=date(2024, 1, 31), day_of_month=31
     ) == date(2024, 2, 29)


def test_monthly_anchor_snaps_day_in_long_month():
     # Base on the 28th (after a February clamp) goes back to the 31st in March
     assert calculate_next_trigger_date(
          RecurrenceType.MONTHLY, 1, date(2025, 1, 31), last_triggered_date=date(2025, 2, 28), day_of_month=31
     ) == date(2025, 3, 31)


def test_base_falls_back_to_start_then_today():
     assert calculate_next_trigger_date(RecurrenceType.DAILY, 1, START) == date(2025, 1, 16)
     assert calculate_next_trigger_date(RecurrenceType.DAILY, 1, None, today=date(2025, 5, 1)) == date(2025, 5, 2)


def test_missing_or_invalid_interval_counts_as_one():
     assert calculate_next_trigger_date(RecurrenceType.WEEKLY, None, START) == date(2025, 1, 22)
     assert calculate_next_trigger_date(RecurrenceType.WEEKLY, 0, START) == date(2025, 1, 22)


def test_unknown_recurrence_type_advances_one_day():
     assert calculate_next_trigger_date("FORTNIGHTLY", 2, START) == date(2025, 1, 16)


def test_result_past_end_date_is_clamped_to_end_date():
     end = date(2025, 2, 1)
     assert calculate_next_trigger_date(RecurrenceType.MONTHLY, 1, START, last_triggered_date=START, end_date=end) == end
     assert calculate_next_trigger_date(RecurrenceType.DAILY, 1, START, last_triggered_date=START, end_date=end) == date(2025, 1, 16)


def test_first_trigger_date_is_start_date_clamped_to_end():
     assert first_trigger_date(START) == START
     assert first_trigger_date(START, end_date=date(2025, 1, 10)) == date(2025, 1, 10)
     assert first_trigger_date(None, today=date(2025, 3, 3)) == date(2025, 3, 3)


def _schedule(**fields):
     values = {
          "recurrence_type": RecurrenceType.DAILY,
          "recurrence_interval": 1,
          "recurrence_day_of_month": None,
          "start_date": date(2025, 1, 10),
          "end_date": None,
          "last_triggered_date": None,
          "next_trigger_date": date(2025, 1, 10),
          "is_active": True,
          "is_paused": False,
     }
     values.update(fields)
     return SimpleNamespace(**values)


def test_next_trigger_for_never_triggered_schedule_is_start_date():
     assert next_trigger_for(_schedule()) == date(2025, 1, 10)
     assert next_trigger_for(_schedule(last_triggered_date=date(2025, 1, 12))) == date(2025, 1, 13)


def test_schedule_pinned_to_end_date_is_due_exactly_once():
     end = date(2025, 1, 12)
     schedule = _schedule(end_date=end, last_triggered_date=date(2025, 1, 11), next_trigger_date=end)
     assert is_due(schedule, end)

     # Fired on the end date: the clamp pins next to the same day
     schedule.last_triggered_date = end
     schedule.next_trigger_date = next_trigger_for(schedule)
     assert schedule.next_trigger_date == end
     assert not is_pending(schedule)
     assert not is_due(schedule, end)
     assert not is_due(schedule, date(2025, 1, 13))


def test_is_due_respects_lifecycle_flags_and_dates():
     today = date(2025, 1, 10)
     assert is_due(_schedule(), today)
     assert not is_due(_schedule(is_paused=True), today)
     assert not is_due(_schedule(is_active=False), today)
     assert not is_due(_schedule(next_trigger_date=date(2025, 1, 11)), today)
     assert not is_due(_schedule(end_date=date(2025, 1, 9), next_trigger_date=date(2025, 1, 9)), today)


def test_fired_one_time_schedule_is_no_longer_pending():
     schedule = _schedule(recurrence_type=RecurrenceType.ONE_TIME, last_triggered_date=date(2025, 1, 10))
     schedule.next_trigger_date = next_trigger_for(schedule)
     assert schedule.next_trigger_date == date(2025, 1, 10)
     assert not is_pending(schedule)
