# File: vivatrain_app/modules/audio/routes.py
from flask import jsonify, request, send_from_directory, url_for
from flask_login import login_required

from vivatrain_app.core.error_handlers import success_response
from vivatrain_app.utils.access import teacher_required
from . import audio_api_bp as blueprint
from .services import AudioService


@blueprint.route('', methods=['POST'])
@login_required
@teacher_required
def upload_audio():
    stored_name = AudioService.save_upload(request.files.get('file'))
    url = url_for('audio_api.serve_audio', filename=stored_name)
    return jsonify(success_response({'url': url, 'filename': stored_name})), 201


@blueprint.route('/<path:filename>', methods=['GET'])
def serve_audio(filename):
    return send_from_directory(AudioService.audio_folder(), filename)
