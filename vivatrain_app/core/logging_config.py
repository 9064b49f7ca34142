"""
Process-wide logging for a deployed VivaTrain server.

Everything under the ``vivatrain_app`` logger goes to the console and to
``<log_dir>/vivatrain.log``, rotated at 10 MB with five backups kept.
Calling :func:`setup_logging` again replaces the handlers it installed.
"""

import logging
import logging.handlers
import os
from typing import List, Optional

LOGGER_NAME = 'vivatrain_app'
LOG_FILENAME = 'vivatrain.log'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5


def default_log_dir() -> str:
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(project_root, 'logs')


def build_handlers(log_dir: str, level: int) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILENAME),
            maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT,
            encoding='utf-8',
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(app=None, log_level: str = 'INFO', log_dir: Optional[str] = None) -> logging.Logger:
    """
    Attach console and rotating file handlers to the ``vivatrain_app`` logger.

    Args:
        app: Flask application; when given, werkzeug's request log is quietened.
        log_level: Level name such as ``DEBUG`` or ``warning``.
        log_dir: Directory for ``vivatrain.log``, created if missing.

    Returns:
        The configured ``vivatrain_app`` logger.
    """
    log_dir = log_dir or default_log_dir()
    os.makedirs(log_dir, exist_ok=True)
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    while logger.handlers:
        old = logger.handlers.pop()
        old.close()
    for handler in build_handlers(log_dir, level):
        logger.addHandler(handler)

    if app is not None:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.info("Logging to %s at %s", os.path.join(log_dir, LOG_FILENAME), logging.getLevelName(level))
    return logger
