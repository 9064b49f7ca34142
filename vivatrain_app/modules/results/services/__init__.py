from .result_service import ResultService
from .revision_service import RevisionService

__all__ = ["ResultService", "RevisionService"]
