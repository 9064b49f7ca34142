# File: vivatrain_app/modules/auth/forms.py
# Form classes for the login and signup pages.

from flask_wtf import FlaskForm
from wtforms import BooleanField, PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, EqualTo, Length, Optional


class LoginForm(FlaskForm):
    """
    Login form.
    """
    email = StringField('Email', validators=[DataRequired(message="Please enter your email.")])
    password = PasswordField('Password', validators=[DataRequired(message="Please enter your password.")])
    remember_me = BooleanField('Remember me')
    submit = SubmitField('Log in')


class SignupForm(FlaskForm):
    """
    Student signup form. Uniqueness and class code checks happen in AuthService.
    """
    name = StringField('Name', validators=[DataRequired(message="Please tell us your name.")])
    email = StringField('Email', validators=[DataRequired(message="Please enter your email.")])
    password = PasswordField('Password', validators=[DataRequired(message="Please enter a password."), Length(min=8)])
    password_confirm = PasswordField(
        'Confirm password',
        validators=[DataRequired(message="Please confirm your password."),
                    EqualTo('password', message='Passwords are not the same.')])
    class_code = StringField('Class code', validators=[Optional()])
    submit = SubmitField('Sign up')
