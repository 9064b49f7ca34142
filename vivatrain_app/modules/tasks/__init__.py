# File: vivatrain_app/modules/tasks/__init__.py
from flask import Blueprint

tasks_api_bp = Blueprint('tasks_api', __name__)

from . import routes  # noqa: E402,F401
