# File: vivatrain_app/core/config.py
# Core Infrastructure Layer: application configuration

import os
from dotenv import load_dotenv

load_dotenv()

# This file lives in vivatrain_app/core/, the project root is two levels up.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "vivatrain.db")


class Config:
    """VivaTrain application configuration."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Seeded on first start when no admin exists
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'admin@example.com')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'admin')

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'uploads')
    AUDIO_UPLOAD_SUBDIR = 'audio'
    ALLOWED_AUDIO_EXTENSIONS = {'mp3', 'wav', 'ogg', 'm4a', 'webm'}
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # Sentence search
    SENTENCE_QUERY_MAX_LIMIT = 200

    # Revision scheduling
    REVISION_INITIAL_RETEST_DAYS = 1

    @classmethod
    def init_app(cls, app):
        """Create the folders the app writes to."""
        uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
        if uri == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
        os.makedirs(os.path.join(app.config['UPLOAD_FOLDER'], cls.AUDIO_UPLOAD_SUBDIR), exist_ok=True)
