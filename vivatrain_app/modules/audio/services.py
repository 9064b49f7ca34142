"""
Audio Service - stores uploaded sentence recordings on local disk.
"""
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from vivatrain_app.core.error_handlers import ValidationError


class AudioService:
    """Save and locate uploaded audio files."""

    @staticmethod
    def audio_folder():
        return os.path.join(current_app.config['UPLOAD_FOLDER'], current_app.config['AUDIO_UPLOAD_SUBDIR'])

    @staticmethod
    def extension_of(filename):
        if not filename or '.' not in filename:
            return ''
        return filename.rsplit('.', 1)[1].lower()

    @staticmethod
    def save_upload(file_storage):
        """
        Persist an uploaded file and return its stored name.

        Raises:
            ValidationError for a missing file or a disallowed extension.
        """
        if file_storage is None or not file_storage.filename:
            raise ValidationError('No audio file was uploaded', errors={'file': 'required'})

        extension = AudioService.extension_of(file_storage.filename)
        allowed = current_app.config['ALLOWED_AUDIO_EXTENSIONS']
        if extension not in allowed:
            raise ValidationError(
                f"Audio must be one of: {', '.join(sorted(allowed))}",
                errors={'file': file_storage.filename},
            )

        stem = secure_filename(file_storage.filename.rsplit('.', 1)[0]) or 'audio'
        stored_name = f"{uuid.uuid4().hex[:12]}_{stem}.{extension}"
        folder = AudioService.audio_folder()
        os.makedirs(folder, exist_ok=True)
        file_storage.save(os.path.join(folder, stored_name))

        current_app.logger.info(f"[Audio] Stored upload as {stored_name}")
        return stored_name
