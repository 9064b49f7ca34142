# File: vivatrain_app/modules/auth/__init__.py
from flask import Blueprint

auth_api_bp = Blueprint('auth_api', __name__)


from .routes import api  # noqa: E402,F401
