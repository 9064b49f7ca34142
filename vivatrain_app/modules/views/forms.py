# File: vivatrain_app/modules/views/forms.py
# Teacher-facing forms for sentences and classes.

from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional


class SentenceForm(FlaskForm):
    """
    Create sentence form.
    """
    sentence = TextAreaField('Sentence', validators=[DataRequired(message="A sentence must have a sentence.")])
    translation = TextAreaField('Translation', validators=[DataRequired(message="A sentence must have a translation.")])
    level = StringField('Level', validators=[Optional(), Length(max=20)])
    viva_ref = StringField('Viva reference', validators=[Optional(), Length(max=50)])
    tense = StringField('Tense', validators=[Optional(), Length(max=50)])
    grammar = StringField('Grammar', validators=[Optional(), Length(max=100)])
    submit = SubmitField('Create sentence')


class ClassForm(FlaskForm):
    name = StringField('Class name', validators=[DataRequired(message="Please name the class."), Length(max=120)])
    submit = SubmitField('Create class')
