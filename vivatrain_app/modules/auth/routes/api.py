# File: vivatrain_app/modules/auth/routes/api.py
from datetime import datetime, timedelta, timezone

from flask import current_app, jsonify, request
from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import OperationalError

from vivatrain_app.core.error_handlers import AuthenticationError, ValidationError, success_response
from vivatrain_app.core.extensions import db
from vivatrain_app.core.signals import user_logged_in
from vivatrain_app.utils.db_session import safe_commit
from .. import auth_api_bp as blueprint
from ..services.auth_service import AuthService


LAST_SEEN_INTERVAL = timedelta(minutes=5)


@blueprint.before_app_request
def record_last_seen():
    """Stamp ``last_seen`` on the logged-in user at most every five minutes."""
    if not current_user.is_authenticated:
        return
    now = datetime.now(timezone.utc)
    previous = current_user.last_seen
    if previous is not None and previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if previous is not None and now - previous < LAST_SEEN_INTERVAL:
        return

    current_user.last_seen = now
    try:
        safe_commit(db.session)
    except OperationalError as exc:
        current_app.logger.warning(f"Could not record last_seen for user {current_user.user_id}: {exc}")


@blueprint.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password')
    if not email or not password:
        raise ValidationError('Please provide email and password!')

    user = AuthService.authenticate_user(email, password)
    if user is None:
        raise AuthenticationError('Incorrect email or password')

    login_user(user, remember=bool(data.get('remember')))
    user_logged_in.send(current_app._get_current_object(), user=user)

    return jsonify(success_response({'user': user.to_dict()}))


@blueprint.route('/logout', methods=['GET', 'POST'])
def logout():
    logout_user()
    return jsonify(success_response(message='Logged out'))


@blueprint.route('/signup', methods=['POST'])
def signup():
    data = request.get_json(silent=True) or {}
    user = AuthService.register_user(
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        password_confirm=data.get('passwordConfirm'),
        class_code=data.get('classCode'),
    )
    login_user(user)
    return jsonify(success_response({'user': user.to_dict()})), 201


@blueprint.route('/me', methods=['GET'])
def me():
    if not current_user.is_authenticated:
        raise AuthenticationError()
    return jsonify(success_response({'user': current_user.to_dict()}))
