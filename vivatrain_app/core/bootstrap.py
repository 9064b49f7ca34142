"""Steps the app factory runs to assemble the VivaTrain application."""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, flash, redirect, request, url_for
from flask_login import current_user

from .error_handlers import AuthenticationError, is_api_request, register_error_handlers
from .extensions import csrf_protect, db, login_manager
from .module_registry import register_default_modules

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(app: Flask) -> None:
    """Give ``app.logger`` a stream handler at ``LOG_LEVEL`` unless one is set up already."""

    if app.logger.handlers:
        return

    app.logger.setLevel(logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper()))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.debug("App logger ready at level %s", logging.getLevelName(app.logger.level))


def register_extensions(app: Flask) -> None:
    """Bind the shared extensions and the JSON error handlers to ``app``."""

    db.init_app(app)
    login_manager.init_app(app)
    csrf_protect.init_app(app)
    register_error_handlers(app)


def register_login_handlers(app: Flask) -> None:
    """Teach Flask-Login how to load users and how to refuse anonymous ones."""

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        # The client controllers need a JSON body, pages get the login form
        if is_api_request():
            error = AuthenticationError("You are not logged in. Please log in to get access.")
            return error.to_dict(), error.status_code
        flash(login_manager.login_message, login_manager.login_message_category)
        return redirect(url_for(login_manager.login_view, next=request.path))


def register_context_processors(app: Flask) -> None:
    """Template globals available on every page."""

    from ..modules.views.logics import format_due_date

    @app.context_processor
    def inject_template_globals() -> Dict[str, Any]:
        return {"current_user": current_user, "format_due_date": format_due_date}


def register_blueprints(app: Flask) -> None:
    registered = register_default_modules(app)
    app.logger.debug("Blueprints: %s", ", ".join(registered))


def register_event_handlers(app: Flask) -> None:
    """Import the modules whose blinker receivers react to domain signals."""

    from ..modules.results import events  # noqa: F401


def ensure_default_admin(app: Flask) -> None:
    """Create the admin account on first start."""

    from ..models import User

    if User.query.filter_by(role=User.ROLE_ADMIN).first() is not None:
        return

    admin = User(name="admin", email=app.config.get("ADMIN_EMAIL", "admin@example.com"), role=User.ROLE_ADMIN)
    admin.set_password(app.config.get("ADMIN_PASSWORD", "admin"))
    db.session.add(admin)
    db.session.commit()
    app.logger.info("Created default admin user %s", admin.email)


def initialize_database(app: Flask) -> None:
    db.create_all()
    ensure_default_admin(app)
