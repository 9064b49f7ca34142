# File: vivatrain_app/modules/audio/__init__.py
from flask import Blueprint

audio_api_bp = Blueprint('audio_api', __name__)


from . import routes  # noqa: E402,F401
