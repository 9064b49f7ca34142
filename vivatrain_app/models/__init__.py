"""SQLAlchemy models, re-exported for convenient imports."""

from ..core.extensions import db
from .user import SchoolClass, User
from .sentence import Sentence
from .task import StudentTask, Task, TaskSentence
from .revision import RevisionItem

__all__ = [
    "db",
    "User",
    "SchoolClass",
    "Sentence",
    "Task",
    "TaskSentence",
    "StudentTask",
    "RevisionItem",
]
