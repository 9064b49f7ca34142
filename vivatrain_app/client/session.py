"""Session queue, tally and finished record used by the session controllers."""

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Iterator, List, Optional, TypeVar

# A missed item comes back after at most this many other items
REASK_OFFSET = 3

T = TypeVar('T')


class SessionQueue(Generic[T]):
    """Ordered pending items; the front is presented next."""

    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    @property
    def front(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def pop_front(self) -> T:
        if not self._items:
            raise IndexError('pop from an empty session queue')
        return self._items.pop(0)

    def reinsert(self, item: T, offset: int = REASK_OFFSET) -> int:
        """Put ``item`` back at ``min(len(queue), offset)`` and return that index."""
        index = min(len(self._items), max(offset, 0))
        self._items.insert(index, item)
        return index

    def as_list(self) -> List[T]:
        return list(self._items)


@dataclass
class SessionTally:
    """Running correct/incorrect counters; only ever grow."""

    initial_count: int
    correct_count: int = 0
    incorrect_count: int = 0

    def record(self, is_correct: bool) -> None:
        if is_correct:
            self.correct_count += 1
        else:
            self.incorrect_count += 1

    @property
    def answered(self) -> int:
        return self.correct_count + self.incorrect_count


@dataclass(frozen=True)
class FinishedEntry:
    item: Any
    student_answer: Optional[str]
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            'sentence': self.item.sentence,
            'studentAnswer': self.student_answer,
            'isCorrect': self.is_correct,
        }


@dataclass
class FinishedRecord:
    """Append-only log of answers, sent with the results."""

    entries: List[FinishedEntry] = field(default_factory=list)

    def append(self, item, student_answer, is_correct) -> FinishedEntry:
        entry = FinishedEntry(item, student_answer, is_correct)
        self.entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self.entries)

    def to_list(self) -> List[dict]:
        return [entry.to_dict() for entry in self.entries]
