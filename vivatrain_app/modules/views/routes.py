# File: vivatrain_app/modules/views/routes.py
# Server-rendered pages. The JSON API lives in the other modules.
from urllib.parse import urlparse

from flask import abort, current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from vivatrain_app.core.error_handlers import ValidationError
from vivatrain_app.core.extensions import db
from vivatrain_app.models import SchoolClass, StudentTask, Task, User
from vivatrain_app.modules.auth.forms import LoginForm, SignupForm
from vivatrain_app.modules.auth.services.auth_service import AuthService
from vivatrain_app.modules.results.services.revision_service import RevisionService
from vivatrain_app.modules.sentences.services.sentence_service import SentenceService
from vivatrain_app.modules.tasks.services.task_service import TaskService
from vivatrain_app.utils.access import teacher_required
from vivatrain_app.utils.db_session import safe_commit
from . import views_bp as blueprint
from .forms import ClassForm, SentenceForm
from .logics import build_local_data, generate_class_code


def _safe_next(default_endpoint):
    next_page = request.args.get('next')
    if not next_page or urlparse(next_page).netloc != '':
        next_page = url_for(default_endpoint)
    return next_page


@blueprint.route('/')
@login_required
def display_tasks():
    if current_user.is_teacher:
        tasks = TaskService.list_tasks_for(current_user)
        return render_template('tasks.html', title='Tasks', tasks=tasks, student_tasks=[])

    student_tasks = TaskService.student_tasks_for(current_user)
    return render_template(
        'tasks.html',
        title='Tasks',
        tasks=[],
        student_tasks=[st for st in student_tasks if not st.is_completed],
        completed_tasks=[st for st in student_tasks if st.is_completed],
    )


@blueprint.route('/train/<int:student_task_id>')
@login_required
def do_exercise(student_task_id):
    student_task = db.session.get(StudentTask, student_task_id)
    if student_task is None:
        abort(404)
    if student_task.student_id != current_user.user_id:
        abort(403)

    task = student_task.task
    local_data = build_local_data(
        sentences=[sentence.to_dict() for sentence in task.sentences],
        studentTask=student_task.student_task_id,
        exerciseType=task.exercise_type,
    )
    return render_template('train.html', title='Train', task=task, sentences=task.sentences, local_data=local_data)


@blueprint.route('/revise')
@login_required
def revise():
    items = RevisionService.list_due(current_user.user_id)
    local_data = build_local_data(revisionItems=[item.to_dict() for item in items])
    return render_template('revise.html', title='Revise', items=items, local_data=local_data)


@blueprint.route('/login', methods=['GET', 'POST'])
def login_form():
    if current_user.is_authenticated:
        return redirect(url_for('views.display_tasks'))

    form = LoginForm()
    if form.validate_on_submit():
        user = AuthService.authenticate_user(form.email.data, form.password.data)
        if user is None:
            flash('Incorrect email or password.', 'danger')
            return redirect(url_for('views.login_form'))

        login_user(user, remember=form.remember_me.data)
        flash('Logged in successfully!', 'success')
        return redirect(_safe_next('views.display_tasks'))

    return render_template('login.html', title='Log into your account', form=form)


@blueprint.route('/signup', methods=['GET', 'POST'])
def signup_form():
    if current_user.is_authenticated:
        return redirect(url_for('views.display_tasks'))

    form = SignupForm()
    if form.validate_on_submit():
        try:
            user = AuthService.register_user(
                name=form.name.data,
                email=form.email.data,
                password=form.password.data,
                password_confirm=form.password_confirm.data,
                class_code=form.class_code.data,
            )
        except ValidationError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            login_user(user)
            flash('Signed up successfully!', 'success')
            return redirect(url_for('views.display_tasks'))

    return render_template('signup.html', title='Sign up', form=form)


@blueprint.route('/logout')
def logout():
    logout_user()
    flash('Logged out!', 'success')
    return redirect(url_for('views.login_form'))


@blueprint.route('/createsentences', methods=['GET', 'POST'])
@login_required
@teacher_required
def create_sentence_form():
    form = SentenceForm()
    if form.validate_on_submit():
        SentenceService.create({
            'sentence': form.sentence.data,
            'translation': form.translation.data,
            'level': form.level.data,
            'vivaRef': form.viva_ref.data,
            'tense': form.tense.data,
            'grammar': form.grammar.data,
        }, user_id=current_user.user_id)
        flash('Sentence created', 'success')
        return redirect(url_for('views.create_sentence_form'))

    return render_template('createsentences.html', title='Create sentences', form=form)


@blueprint.route('/settasks')
@login_required
@teacher_required
def set_tasks_form():
    filter_options = {
        'level': SentenceService.distinct_values('level'),
        'tense': SentenceService.distinct_values('tense'),
        'grammar': SentenceService.distinct_values('grammar'),
        'vivaRef': SentenceService.distinct_values('viva_ref'),
    }
    return render_template(
        'settasks.html',
        title='Create tasks',
        classes=current_user.taught_classes,
        tasks=TaskService.list_tasks_for(current_user),
        filter_options=filter_options,
        exercise_types=Task.EXERCISE_TYPES,
    )


@blueprint.route('/myclasses', methods=['GET', 'POST'])
@login_required
@teacher_required
def my_classes():
    form = ClassForm()
    if form.validate_on_submit():
        code = generate_class_code(exists=lambda c: SchoolClass.query.filter_by(class_code=c).first() is not None)
        school_class = SchoolClass(name=form.name.data.strip(), class_code=code, teacher_id=current_user.user_id)
        db.session.add(school_class)
        safe_commit(db.session)
        current_app.logger.info(f"Class {school_class.class_id} created by {current_user.user_id}")
        flash(f'Class created. Students join with code {code}.', 'success')
        return redirect(url_for('views.my_classes'))

    return render_template('myclasses.html', title='My classes', classes=current_user.taught_classes, form=form)


@blueprint.route('/myclasses/<int:class_id>')
@login_required
@teacher_required
def get_class(class_id):
    class_data = db.session.get(SchoolClass, class_id)
    if class_data is None:
        abort(404)
    if class_data.teacher_id != current_user.user_id and current_user.role != User.ROLE_ADMIN:
        abort(403)

    students = (
        User.query.filter_by(class_id=class_id, role=User.ROLE_STUDENT).order_by(User.name).all()
    )
    tasks = Task.query.filter_by(class_id=class_id).order_by(Task.created_at).all()
    task_ids = [task.task_id for task in tasks]
    results = {}
    if task_ids:
        for st in StudentTask.query.filter(StudentTask.task_id.in_(task_ids)).all():
            results[(st.student_id, st.task_id)] = st

    return render_template(
        'classoverview.html',
        title='My classes',
        class_data=class_data,
        students=students,
        tasks=tasks,
        results=results,
    )


@blueprint.route('/me')
@login_required
def get_account():
    return render_template('account.html', title='Your account')
