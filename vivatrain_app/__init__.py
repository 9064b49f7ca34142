"""VivaTrain: sentence drills and spaced revision for language classes."""

from __future__ import annotations

from flask import Flask

from .core import bootstrap
from .core.config import Config
from .core.extensions import db

__all__ = ["create_app", "db"]

SETUP_STEPS = (
    bootstrap.configure_logging,
    bootstrap.register_extensions,
    bootstrap.register_login_handlers,
    bootstrap.register_context_processors,
    bootstrap.register_blueprints,
    bootstrap.register_event_handlers,
)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Build a VivaTrain app from ``config_class`` and make sure its tables exist."""

    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    for step in SETUP_STEPS:
        step(app)

    with app.app_context():
        bootstrap.initialize_database(app)

    return app
