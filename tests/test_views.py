"""
Tests for the server-rendered pages

Tests cover:
- Login and signup forms
- Role checks on teacher pages
- Page data embedded for the client controllers
"""

import datetime

import pytest

from vivatrain_app.client.storage import LocalStore
from vivatrain_app.models import RevisionItem, SchoolClass, StudentTask, Task, TaskSentence, db
from vivatrain_app.modules.views.logics import build_local_data, format_due_date, generate_class_code


class TestViewLogics:

    def test_format_due_date(self):
        today = datetime.date(2024, 3, 1)
        assert format_due_date(None) == 'No due date'
        assert format_due_date(today, today=today) == 'Due today'
        assert format_due_date(datetime.date(2024, 3, 2), today=today) == 'Due tomorrow'
        assert format_due_date(datetime.date(2024, 2, 1), today=today) == 'Overdue since 01 Feb 2024'
        assert format_due_date(datetime.date(2024, 4, 1), today=today) == 'Due 01 Apr 2024'

    def test_generate_class_code_skips_taken(self):
        seen = []

        def exists(code):
            seen.append(code)
            return len(seen) < 3

        code = generate_class_code(exists)
        assert code == seen[-1]
        assert len(seen) == 3
        assert len(code) == 6

    def test_build_local_data_escapes_script_end(self):
        data = build_local_data(sentences=[{'sentence': '</script>'}])
        assert '</' not in data
        assert LocalStore.from_json(data).get_local('sentences') == [{'sentence': '</script>'}]


class TestAuthPages:

    def test_home_redirects_to_login(self, client):
        response = client.get('/')
        assert response.status_code == 302
        assert '/login' in response.headers['Location']

    def test_login_form(self, client, student):
        response = client.post('/login', data={'email': 'student@example.com', 'password': 'password123'})
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/')

    def test_login_form_wrong_password(self, client, student):
        response = client.post('/login', data={'email': 'student@example.com', 'password': 'wrong'},
                               follow_redirects=True)
        assert b'Incorrect email or password.' in response.data

    def test_signup_form(self, client, school_class):
        response = client.post('/signup', data={
            'name': 'Page Student',
            'email': 'page@example.com',
            'password': 'password123',
            'password_confirm': 'password123',
            'class_code': 'ABC123',
        })
        assert response.status_code == 302
        assert len(school_class.students) == 1

    def test_signup_form_bad_code(self, client, school_class):
        response = client.post('/signup', data={
            'name': 'Page Student',
            'email': 'page@example.com',
            'password': 'password123',
            'password_confirm': 'password123',
            'class_code': 'NOPE',
        })
        assert response.status_code == 200
        assert b'No class found with that code.' in response.data

    def test_logout_redirects_to_login(self, client, student, login):
        login(student)
        response = client.get('/logout')
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/login')


class TestStudentPages:

    @pytest.fixture
    def student_task(self, teacher, school_class, student, sentences):
        task = Task(title='Dogs and cinema', exercise_type='cloze', set_by=teacher.user_id,
                    school_class=school_class, due_date=datetime.date.today())
        for sentence in sentences[:2]:
            task.sentence_links.append(TaskSentence(sentence=sentence))
        student_task = StudentTask(student=student, task=task, initial_count=2)
        db.session.add_all([task, student_task])
        db.session.commit()
        return student_task

    def test_task_list(self, client, student, student_task, login):
        login(student)
        response = client.get('/')
        assert response.status_code == 200
        assert b'Dogs and cinema' in response.data
        assert b'Due today' in response.data

    def test_train_page_embeds_session_data(self, client, student, student_task, sentences, login):
        login(student)
        response = client.get(f'/train/{student_task.student_task_id}')
        assert response.status_code == 200

        store = LocalStore.from_page(response.get_data(as_text=True))
        assert store.get_local('studentTask') == student_task.student_task_id
        assert store.get_local('exerciseType') == 'cloze'
        assert [s['id'] for s in store.get_local('sentences')] == [s.sentence_id for s in sentences[:2]]

    def test_train_page_of_other_student(self, client, teacher, student_task, login):
        login(teacher)
        assert client.get(f'/train/{student_task.student_task_id}').status_code == 403

    def test_revise_page(self, client, student, sentences, login):
        db.session.add(RevisionItem(student_id=student.user_id, sentence_id=sentences[0].sentence_id,
                                    next_due=datetime.date.today()))
        db.session.commit()

        login(student)
        response = client.get('/revise')
        store = LocalStore.from_page(response.get_data(as_text=True))
        assert [item['sentence']['id'] for item in store.get_local('revisionItems')] == [sentences[0].sentence_id]

    def test_account_page(self, client, student, login):
        login(student)
        response = client.get('/me')
        assert b'Sam Student' in response.data
        assert b'Year 9 German' in response.data


class TestTeacherPages:

    @pytest.mark.parametrize('path', ['/createsentences', '/settasks', '/myclasses'])
    def test_students_are_refused(self, client, student, login, path):
        login(student)
        assert client.get(path).status_code == 403

    def test_create_sentence_form(self, client, teacher, login):
        login(teacher)
        response = client.post('/createsentences', data={
            'sentence': 'Es regnet.',
            'translation': 'It is raining.',
            'level': 'A1',
        }, follow_redirects=True)
        assert b'Sentence created' in response.data

    def test_settasks_lists_filter_options(self, client, teacher, school_class, sentences, login):
        login(teacher)
        response = client.get('/settasks')
        assert response.status_code == 200
        assert b'perfect' in response.data
        assert b'Year 9 German' in response.data

    def test_create_class(self, client, teacher, login):
        login(teacher)
        response = client.post('/myclasses', data={'name': 'Year 10 French'}, follow_redirects=True)
        school_class = SchoolClass.query.filter_by(name='Year 10 French').one()
        assert school_class.teacher_id == teacher.user_id
        assert school_class.class_code.encode() in response.data

    def test_class_overview(self, client, teacher, school_class, student, login):
        login(teacher)
        response = client.get(f'/myclasses/{school_class.class_id}')
        assert response.status_code == 200
        assert b'Sam Student' in response.data
        assert b'ABC123' in response.data
