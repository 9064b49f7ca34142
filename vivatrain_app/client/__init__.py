"""Client-side controllers that drive the VivaTrain pages through the REST API."""

from .api import ApiClient, ApiError
from .audio import AudioAttachmentCoordinator
from .config import ClientConfig
from .controllers import (
    Controller,
    CreateSentenceController,
    CreateTaskRandomController,
    LoginController,
    LogoutController,
    ReviseController,
    RevisionCard,
    SignupController,
    TaskAuthoringController,
    TrainController,
)
from .exercises import ExerciseItem, build_exercise_item, normalize_answer
from .session import REASK_OFFSET, SessionQueue, SessionTally
from .storage import LocalStore
from .views import AlertView, Navigator, View

__all__ = [
    'AlertView',
    'ApiClient',
    'ApiError',
    'AudioAttachmentCoordinator',
    'ClientConfig',
    'Controller',
    'CreateSentenceController',
    'CreateTaskRandomController',
    'ExerciseItem',
    'LocalStore',
    'LoginController',
    'LogoutController',
    'Navigator',
    'REASK_OFFSET',
    'ReviseController',
    'RevisionCard',
    'SessionQueue',
    'SessionTally',
    'SignupController',
    'TaskAuthoringController',
    'TrainController',
    'View',
    'build_exercise_item',
    'normalize_answer',
]
