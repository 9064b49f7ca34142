"""
Error handling for the VivaTrain API.

Every failure under ``/api/`` reaches the client as
``{"success": false, "message": ..., "code": ..., "details"?: ...}``;
the client controllers show ``message`` to the user verbatim. HTML pages
keep Flask's default error pages.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException

API_PREFIX = '/api/'

# Friendlier wording for the HTTP errors the API raises most
HTTP_ERROR_MESSAGES = {
    404: ('Endpoint not found', 'NOT_FOUND'),
    405: ('Method not allowed', 'METHOD_NOT_ALLOWED'),
    413: ('Upload is too large', 'PAYLOAD_TOO_LARGE'),
    500: ('Internal server error', 'SERVER_ERROR'),
}


class VivaTrainError(Exception):
    """Base for errors a service raises to fail the current request."""

    status_code = 500
    code = 'UNKNOWN_ERROR'
    default_message = 'Something went wrong'

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return failure_body(self.message, self.code, self.details)


class NotFoundError(VivaTrainError):
    status_code = 404
    code = 'NOT_FOUND'
    default_message = 'Resource not found'

    def __init__(self, message: Optional[str] = None, resource: Optional[str] = None):
        super().__init__(message, {'resource': resource} if resource else None)


class ValidationError(VivaTrainError):
    """Input rejected; ``errors`` maps payload keys to what was wrong."""

    status_code = 400
    code = 'VALIDATION_ERROR'
    default_message = 'Validation failed'

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, Any]] = None):
        super().__init__(message, {'errors': errors} if errors else None)

    @property
    def errors(self) -> Dict[str, Any]:
        return self.details.get('errors', {})


class AuthenticationError(VivaTrainError):
    status_code = 401
    code = 'UNAUTHENTICATED'
    default_message = 'You are not logged in'


class AuthorizationError(VivaTrainError):
    status_code = 403
    code = 'UNAUTHORIZED'
    default_message = 'Access denied'


def failure_body(message: str, code: str = 'ERROR', details: Optional[Dict[str, Any]] = None) -> dict:
    body = {'success': False, 'message': message, 'code': code}
    if details:
        body['details'] = details
    return body


def error_response(message: str, code: str = 'ERROR', status_code: int = 400, details: Dict = None) -> tuple:
    """Standard JSON failure response."""
    return jsonify(failure_body(message, code, details)), status_code


def success_response(data: Any = None, message: str = None, results: int = None) -> dict:
    """Standard JSON success body; ``results`` is the item count for list endpoints."""
    response = {'success': True}
    if results is not None:
        response['results'] = results
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def is_api_request() -> bool:
    return request.path.startswith(API_PREFIX)


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(VivaTrainError)
    def handle_vivatrain_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.warning
        log(f"{request.method} {request.path} -> {error.status_code} {error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code is None or error.code < 400 or not is_api_request():
            return error
        if error.code >= 500:
            current_app.logger.error('Internal server error', exc_info=getattr(error, 'original_exception', None))
        message, code = HTTP_ERROR_MESSAGES.get(
            error.code, (error.description, error.name.upper().replace(' ', '_'))
        )
        return error_response(message, code, error.code)
