from .sentence_service import SentenceService

__all__ = ["SentenceService"]
