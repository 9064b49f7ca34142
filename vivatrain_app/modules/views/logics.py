"""Pure helpers for page rendering."""

import json
import secrets
import string
from datetime import date

CLASS_CODE_ALPHABET = string.ascii_uppercase + string.digits
CLASS_CODE_LENGTH = 6


def format_due_date(value, today=None):
    """Human label for a task due date."""
    if value is None:
        return 'No due date'
    today = today or date.today()
    delta = (value - today).days
    if delta == 0:
        return 'Due today'
    if delta == 1:
        return 'Due tomorrow'
    if delta < 0:
        return f'Overdue since {value.strftime("%d %b %Y")}'
    return f'Due {value.strftime("%d %b %Y")}'


def generate_class_code(exists=None):
    """Random class code; ``exists`` rejects codes already taken."""
    while True:
        code = ''.join(secrets.choice(CLASS_CODE_ALPHABET) for _ in range(CLASS_CODE_LENGTH))
        if exists is None or not exists(code):
            return code


def build_local_data(**entries):
    """
    Serialize page data the client controllers read with ``get_local``.

    ``</`` is escaped so the JSON can sit inside a script tag.
    """
    return json.dumps(entries).replace('</', '<\\/')
