"""Role checks shared by page and API routes."""

from functools import wraps

from flask import abort, flash
from flask_login import current_user

from ..core.error_handlers import AuthenticationError, AuthorizationError, is_api_request


def teacher_required(view):
    """Allow only logged-in teachers (and admins) through."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            if is_api_request():
                raise AuthenticationError()
            abort(401)
        if not current_user.is_teacher:
            if is_api_request():
                raise AuthorizationError('Only teachers can perform this action')
            flash('Only teachers can access this page.', 'danger')
            abort(403)
        return view(*args, **kwargs)

    return wrapped
