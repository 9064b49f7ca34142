import os
import sys

import pytest
from flask import g

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vivatrain_app import create_app, db
from vivatrain_app.core.config import Config
from vivatrain_app.models import SchoolClass, Sentence, User


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app(tmp_path):
    config_class = type('TmpConfig', (TestConfig,), {'UPLOAD_FOLDER': str(tmp_path / 'uploads')})
    app = create_app(config_class)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def login_client(client, user_id):
    with client.session_transaction() as session:
        session['_user_id'] = str(user_id)
        session['_fresh'] = True


def make_user(name, email, role=User.ROLE_STUDENT, password='password123', school_class=None):
    user = User(name=name, email=email, role=role, school_class=school_class)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def teacher(app):
    return make_user('Ms Teacher', 'teacher@example.com', role=User.ROLE_TEACHER)


@pytest.fixture
def school_class(app, teacher):
    school_class = SchoolClass(name='Year 9 German', class_code='ABC123', teacher_id=teacher.user_id)
    db.session.add(school_class)
    db.session.commit()
    return school_class


@pytest.fixture
def student(app, school_class):
    return make_user('Sam Student', 'student@example.com', school_class=school_class)


@pytest.fixture
def sentences(app, teacher):
    rows = [
        Sentence(sentence='Ich habe einen Hund.', translation='I have a dog.', level='A1', tense='present',
                 grammar='accusative', viva_ref='U1', created_by=teacher.user_id),
        Sentence(sentence='Ich bin ins Kino gegangen.', translation='I went to the cinema.', level='A2',
                 tense='perfect', grammar='sein', viva_ref='U2', created_by=teacher.user_id),
        Sentence(sentence='Wir spielen Fußball.', translation='We play football.', level='A1', tense='present',
                 grammar='verbs', viva_ref='U1', created_by=teacher.user_id),
    ]
    db.session.add_all(rows)
    db.session.commit()
    return rows


@pytest.fixture
def login(client):
    def _login(user):
        login_client(client, user.user_id)
        # The app context is shared with requests, drop the cached user
        g.pop('_login_user', None)
        return client
    return _login
