# services/target_resolver.py
"""
Target resolver - turns a schedule's targeting rule into unit ids.

Every target type is filtered through the occupancy check: a schedule
never produces work for a vacant unit. Malformed payloads resolve to an
empty list and are logged rather than raised.
"""
import json
import logging
from typing import Iterable, List, Optional

from models.maintenance_schedule import TargetType

logger = logging.getLogger(__name__)


def _strip_payload(payload: Optional[str]) -> str:
     return (payload or "").replace('"', "").strip()


def parse_id_list(payload: Optional[str]) -> List[int]:
     """
     Parse a JSON array of ids (e.g. "[1, 2, 3]").

     Returns an empty list for empty or malformed input.
     """
     if not payload or not payload.strip():
          return []
     try:
          values = json.loads(payload)
          if not isinstance(values, list):
               raise ValueError("expected a JSON array")
          return [int(value) for value in values]
     except (ValueError, TypeError):
          logger.error("Error parsing id list payload: %r", payload)
          return []


def parse_floor(payload: Optional[str]) -> Optional[int]:
     try:
          return int(_strip_payload(payload))
     except ValueError:
          logger.error("Invalid floor number: %r", payload)
          return None


def _dedupe(unit_ids: Iterable[int]) -> List[int]:
     seen = set()
     ordered = []
     for unit_id in unit_ids:
          if unit_id not in seen:
               seen.add(unit_id)
               ordered.append(unit_id)
     return ordered


def resolve_raw_units(target_type, payload: Optional[str], directory) -> List[int]:
     """Units selected by the targeting rule, before the occupancy filter."""
     try:
          target = TargetType(target_type)
     except ValueError:
          logger.warning("Unknown target type: %s", target_type)
          return []

     if target == TargetType.ALL_UNITS:
          unit_ids = directory.list_unit_ids()
          logger.info("Target: ALL_UNITS - found %d units", len(unit_ids))
     elif target == TargetType.FLOOR:
          floor = parse_floor(payload)
          if floor is None:
               return []
          unit_ids = directory.list_unit_ids(floor=floor)
          logger.info("Target: FLOOR %d - found %d units", floor, len(unit_ids))
     elif target == TargetType.UNIT_TYPE:
          unit_type = _strip_payload(payload)
          unit_ids = directory.list_unit_ids(unit_type=unit_type)
          logger.info("Target: UNIT_TYPE %s - found %d units", unit_type, len(unit_ids))
     else:
          unit_ids = parse_id_list(payload)
          logger.info("Target: SPECIFIC_UNITS - %d units specified", len(unit_ids))

     return _dedupe(unit_ids)


def resolve_target_units(target_type, payload: Optional[str], directory) -> List[int]:
     """
     Resolve a targeting rule to the occupied unit ids it covers.

     Args:
          target_type: TargetType (or its string value)
          payload: Opaque target payload (JSON id list, floor number or unit type)
          directory: Object providing list_unit_ids(floor=, unit_type=) and is_occupied(unit_id)

     Returns:
          De-duplicated occupied unit ids, in first-seen order
     """
     unit_ids = resolve_raw_units(target_type, payload, directory)
     occupied = [unit_id for unit_id in unit_ids if directory.is_occupied(unit_id)]
     logger.info("Filtered to %d occupied units (from %d total units)", len(occupied), len(unit_ids))
     return occupied
