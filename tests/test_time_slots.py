# tests/test_time_slots.py
from datetime import date
from types import SimpleNamespace

from models import RequestStatus
from services.time_slots import DEFAULT_SLOT, TIME_SLOTS, TimeSlotAllocator, format_slot

DAY = date(2025, 1, 15)
UNIT_ID = 7


class FakeWorkItems:

     def __init__(self, items):
          self.items = items

     def list_work_items(self, unit_id, date_substring=None):
          return [
               item for item in self.items
               if item.unit_id == unit_id
               and (date_substring is None or (item.preferred_time and date_substring in item.preferred_time))
          ]


def item(slot, status=RequestStatus.SUBMITTED, unit_id=UNIT_ID, day=DAY):
     return SimpleNamespace(unit_id=unit_id, preferred_time=format_slot(day, slot), status=status)


def test_format_slot():
     assert format_slot(DAY, "10:00") == "2025-01-15T10:00:00"
     assert format_slot("2025-01-15") == "2025-01-15T09:00:00"
     assert DEFAULT_SLOT == "09:00"
     assert len(TIME_SLOTS) == 9


def test_first_free_slot_is_returned():
     allocator = TimeSlotAllocator(FakeWorkItems([item("09:00"), item("10:00"), item("12:00")]))
     assert allocator.find_available_slot(UNIT_ID, DAY) == "2025-01-15T11:00:00"


def test_bookings_on_other_days_or_units_are_ignored():
     allocator = TimeSlotAllocator(
          FakeWorkItems([item("09:00", unit_id=8), item("09:00", day=date(2025, 1, 16))])
     )
     assert allocator.find_available_slot(UNIT_ID, DAY) == "2025-01-15T09:00:00"


def test_fully_booked_day_falls_back_to_first_slot():
     allocator = TimeSlotAllocator(FakeWorkItems([item(slot) for slot in TIME_SLOTS]))
     assert allocator.find_available_slot(UNIT_ID, DAY) == "2025-01-15T09:00:00"


def test_conflict_only_counts_open_work_items():
     target = format_slot(DAY, "09:00")
     for status in (RequestStatus.SUBMITTED, RequestStatus.IN_PROGRESS):
          assert TimeSlotAllocator(FakeWorkItems([item("09:00", status)])).has_conflict(UNIT_ID, target)
     for status in (RequestStatus.COMPLETED, RequestStatus.CANCELLED, RequestStatus.PENDING_TENANT_CONFIRMATION):
          assert not TimeSlotAllocator(FakeWorkItems([item("09:00", status)])).has_conflict(UNIT_ID, target)


def test_conflict_needs_exact_match():
     allocator = TimeSlotAllocator(FakeWorkItems([item("09:00")]))
     assert not allocator.has_conflict(UNIT_ID, "2025-01-15 09:00")
     assert not allocator.has_conflict(UNIT_ID, None)


def test_available_slots_flags_booked_hours():
     allocator = TimeSlotAllocator(FakeWorkItems([item("13:00"), item("17:00", RequestStatus.COMPLETED)]))
     slots = allocator.available_slots(UNIT_ID, DAY)
     assert [slot["time_slot"] for slot in slots] == list(TIME_SLOTS)
     booked = [slot["time_slot"] for slot in slots if not slot["available"]]
     assert booked == ["13:00", "17:00"]
     assert slots[0]["preferred_date_time"] == "2025-01-15T09:00:00"
