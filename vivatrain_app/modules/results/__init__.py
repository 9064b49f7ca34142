# File: vivatrain_app/modules/results/__init__.py
from flask import Blueprint

student_tasks_api_bp = Blueprint('student_tasks_api', __name__)
revision_api_bp = Blueprint('revision_api', __name__)

from . import routes  # noqa: E402,F401
