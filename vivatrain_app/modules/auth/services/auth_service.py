"""
Auth Service - Core authentication logic.

Handles user registration and authentication details.
Decouples DB logic from Routes.
"""
from flask import current_app
from vivatrain_app.core.error_handlers import ValidationError
from vivatrain_app.core.extensions import db
from vivatrain_app.core.signals import user_registered
from vivatrain_app.models import SchoolClass, User
from vivatrain_app.utils.db_session import safe_commit
from ..config import AuthModuleDefaultConfig


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def normalize_email(email):
        return (email or '').strip().lower()

    @staticmethod
    def validate_registration(name, email, password, password_confirm, class_code=None):
        """
        Check signup input and resolve the class code.

        Returns:
            The SchoolClass the student joins, or None when no code was given.
        Raises:
            ValidationError describing every failing field.
        """
        errors = {}
        if not (name or '').strip():
            errors['name'] = 'Please tell us your name.'
        if not email or '@' not in email:
            errors['email'] = 'Please provide a valid email.'
        elif User.query.filter_by(email=email).first() is not None:
            errors['email'] = 'This email is already registered.'
        if not password or len(password) < AuthModuleDefaultConfig.AUTH_MIN_PASSWORD_LENGTH:
            errors['password'] = (
                f'Password must be at least {AuthModuleDefaultConfig.AUTH_MIN_PASSWORD_LENGTH} characters.'
            )
        elif password != password_confirm:
            errors['passwordConfirm'] = 'Passwords are not the same.'

        school_class = None
        if class_code:
            school_class = SchoolClass.query.filter_by(class_code=class_code.strip()).first()
            if school_class is None:
                errors['classCode'] = 'No class found with that code.'

        if errors:
            # Surface the first problem as the headline message
            raise ValidationError(next(iter(errors.values())), errors=errors)
        return school_class

    @staticmethod
    def register_user(name, email, password, password_confirm, class_code=None):
        """
        Register a new student and emit signal.

        Returns:
            User object if successful
        Raises:
            ValidationError if input is rejected
        """
        email = AuthService.normalize_email(email)
        school_class = AuthService.validate_registration(name, email, password, password_confirm, class_code)

        user = User(
            name=name.strip(),
            email=email,
            role=User.ROLE_STUDENT,
            school_class=school_class,
        )
        user.set_password(password)
        db.session.add(user)
        safe_commit(db.session)

        current_app.logger.info(f"User registered: {email} ({user.user_id})")

        try:
            user_registered.send(current_app._get_current_object(), user=user)
        except Exception as e:
            # The user is already committed at this point
            current_app.logger.error(f"Error emitting user_registered signal: {e}")

        return user

    @staticmethod
    def authenticate_user(email, password):
        """
        Verify credentials.

        Returns:
            User object if valid, None otherwise.
        """
        user = User.query.filter_by(email=AuthService.normalize_email(email)).first()

        if user and user.check_password(password or ''):
            return user

        return None
