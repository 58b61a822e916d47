# services/time_slots.py
"""
Time-slot allocator for maintenance visits.

Visits are placed on a fixed hourly grid (09:00 - 17:00). Allocation is
advisory: when every slot of the day is taken the first slot is handed out
again rather than failing.
"""
from datetime import date
from typing import Dict, List, Optional, Union

from models.maintenance_request import OPEN_STATUSES

TIME_SLOTS = (
     "09:00", "10:00", "11:00", "12:00", "13:00",
     "14:00", "15:00", "16:00", "17:00",
)

DEFAULT_SLOT = TIME_SLOTS[0]


def format_slot(target_date: Union[date, str], slot: str = DEFAULT_SLOT) -> str:
     """'2025-01-15', '10:00' -> '2025-01-15T10:00:00'"""
     return f"{target_date}T{slot}:00"


class TimeSlotAllocator:
     """
     Picks free slots and detects clashes against a unit's existing work items.

     `directory` must provide list_work_items(unit_id, date_substring=None).
     """

     def __init__(self, directory):
          self.directory = directory

     def booked_slots(self, unit_id: int, target_date: Union[date, str]) -> List[str]:
          day = str(target_date)
          existing = self.directory.list_work_items(unit_id, day)
          return [
               slot for slot in TIME_SLOTS
               if any(item.preferred_time and slot in item.preferred_time for item in existing)
          ]

     def find_available_slot(self, unit_id: int, target_date: Union[date, str]) -> str:
          booked = set(self.booked_slots(unit_id, target_date))
          for slot in TIME_SLOTS:
               if slot not in booked:
                    return format_slot(target_date, slot)
          return format_slot(target_date, DEFAULT_SLOT)

     def has_conflict(self, unit_id: int, preferred_date_time: Optional[str]) -> bool:
          if not preferred_date_time:
               return False
          return any(
               item.preferred_time == preferred_date_time and item.status in OPEN_STATUSES
               for item in self.directory.list_work_items(unit_id)
          )

     def available_slots(self, unit_id: int, target_date: Union[date, str]) -> List[Dict[str, object]]:
          """Every grid slot of the day with its booked flag, for time pickers."""
          booked = set(self.booked_slots(unit_id, target_date))
          return [
               {
                    "time_slot": slot,
                    "preferred_date_time": format_slot(target_date, slot),
                    "available": slot not in booked,
               }
               for slot in TIME_SLOTS
          ]
