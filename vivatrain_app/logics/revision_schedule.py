"""
Revision Schedule - pure spaced-repetition arithmetic.

No database or network access. A correct answer triples the retest
interval, a wrong one sends the sentence back to tomorrow.
"""

import datetime
from dataclasses import dataclass, replace
from typing import Optional


class RevisionConstants:
    """Constants for the revision schedule"""
    RETEST_MULTIPLIER = 3
    MIN_RETEST_DAYS = 1
    RESET_RETEST_DAYS = 1


@dataclass(frozen=True)
class RevisionState:
    """Schedule fields of one revision item."""

    retest_days: int = RevisionConstants.MIN_RETEST_DAYS
    correct_attempts: int = 0
    incorrect_attempts: int = 0
    next_due: Optional[datetime.date] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RevisionState":
        next_due = data.get('nextDue')
        if isinstance(next_due, str):
            next_due = datetime.date.fromisoformat(next_due[:10])
        return cls(
            retest_days=int(data.get('retestDays') or 0),
            correct_attempts=int(data.get('correctAttempts') or 0),
            incorrect_attempts=int(data.get('incorrectAttempts') or 0),
            next_due=next_due,
        )

    def to_dict(self) -> dict:
        return {
            'retestDays': self.retest_days,
            'correctAttempts': self.correct_attempts,
            'incorrectAttempts': self.incorrect_attempts,
            'nextDue': self.next_due.isoformat() if self.next_due else None,
        }


def next_retest_days(current_days: int, is_correct: bool) -> int:
    """Interval after an answer: tripled (at least one day) or reset."""
    if not is_correct:
        return RevisionConstants.RESET_RETEST_DAYS
    return max(RevisionConstants.MIN_RETEST_DAYS, (current_days or 0) * RevisionConstants.RETEST_MULTIPLIER)


def schedule_next(state: RevisionState, is_correct: bool, today: Optional[datetime.date] = None) -> RevisionState:
    """
    Return the state after one answer.

    Args:
        state: schedule before the answer
        is_correct: whether the student got it right
        today: reference date, defaults to ``datetime.date.today()``
    """
    today = today or datetime.date.today()
    retest_days = next_retest_days(state.retest_days, is_correct)
    if is_correct:
        return replace(
            state,
            retest_days=retest_days,
            correct_attempts=state.correct_attempts + 1,
            next_due=today + datetime.timedelta(days=retest_days),
        )
    return replace(
        state,
        retest_days=retest_days,
        incorrect_attempts=state.incorrect_attempts + 1,
        next_due=today + datetime.timedelta(days=retest_days),
    )
