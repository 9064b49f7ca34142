# File: vivatrain_app/core/extensions.py
# Extension singletons; bootstrap.register_extensions binds them to the app

import sqlite3

from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Applied to every new SQLite connection
SQLITE_SETTINGS = {
    'journal_mode': 'WAL',
    'synchronous': 'NORMAL',
    'busy_timeout': 30000,
}


def _build_login_manager() -> LoginManager:
    manager = LoginManager()
    manager.login_view = 'views.login_form'
    manager.login_message = 'Please log in to access this page.'
    manager.login_message_category = 'info'
    return manager


db = SQLAlchemy()
login_manager = _build_login_manager()
csrf_protect = CSRFProtect()


@event.listens_for(Engine, 'connect')
def apply_sqlite_settings(dbapi_connection, _connection_record):
    """Apply ``SQLITE_SETTINGS`` to new SQLite connections."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    try:
        for name, value in SQLITE_SETTINGS.items():
            cursor.execute(f'PRAGMA {name}={value}')
    finally:
        cursor.close()


__all__ = ['db', 'login_manager', 'csrf_protect']
