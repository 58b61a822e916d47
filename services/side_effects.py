# services/side_effects.py
"""
Best-effort execution of audit / notification writes.

Each call runs inside its own SAVEPOINT: a failure rolls back only what the
side effect wrote, is logged, and never reaches the caller's transaction.
"""
import logging
from typing import Callable

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def run_best_effort(db: Session, description: str, func: Callable, *args, **kwargs) -> bool:
     """Run func(*args, **kwargs) in a savepoint; returns False when it failed."""
     try:
          with db.begin_nested():
               func(*args, **kwargs)
          return True
     except Exception:
          logger.exception("Failed to %s", description)
          return False
