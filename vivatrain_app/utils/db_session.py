"""Commit helper shared by the VivaTrain services.

Two requests writing at once can hit ``database is locked`` on SQLite;
those commits are retried with exponential backoff. A unique constraint
violation (a student assigned the same task twice, a sentence already on a
student's revision list) is rolled back and reported as a
:class:`~vivatrain_app.core.error_handlers.ValidationError`.
"""

from __future__ import annotations

import logging
import time

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.session import Session

from ..core.error_handlers import ValidationError

logger = logging.getLogger(__name__)

LOCK_MARKERS = ("database is locked", "database is busy")


def is_lock_error(error: OperationalError) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in LOCK_MARKERS)


def safe_commit(session: Session, retries: int = 5, initial_delay: float = 0.1) -> None:
    """Commit ``session``, retrying while SQLite reports a lock.

    Args:
        session: The SQLAlchemy session to commit.
        retries: Attempts before the lock error is re-raised.
        initial_delay: Seconds before the first retry; doubled each time.

    Raises:
        ValidationError: the commit broke a unique or foreign key constraint.
        OperationalError: the database stayed locked, or failed otherwise.
    """
    delay = initial_delay
    for attempt in range(1, retries + 1):
        try:
            session.commit()
            return
        except IntegrityError as exc:
            session.rollback()
            logger.warning("Commit rejected by a database constraint: %s", exc.orig)
            raise ValidationError('This record conflicts with existing data') from exc
        except OperationalError as exc:
            session.rollback()
            if attempt == retries or not is_lock_error(exc):
                raise
            logger.info("Database locked, retrying commit in %.2fs (attempt %d/%d)", delay, attempt, retries)
            time.sleep(delay)
            delay *= 2
