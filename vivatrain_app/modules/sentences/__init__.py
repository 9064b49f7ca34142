# File: vivatrain_app/modules/sentences/__init__.py
from flask import Blueprint

sentences_api_bp = Blueprint('sentences_api', __name__)

from . import routes  # noqa: E402,F401
