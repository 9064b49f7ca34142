from datetime import date, datetime, timezone

from flask import current_app

from vivatrain_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from vivatrain_app.core.extensions import db
from vivatrain_app.core.signals import student_task_completed
from vivatrain_app.models import StudentTask, User
from vivatrain_app.utils.db_session import safe_commit


def _non_negative_int(data, key):
    value = data.get(key)
    if isinstance(value, bool):
        value = None
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{key} must be a whole number', errors={key: data.get(key)})
    if value < 0:
        raise ValidationError(f'{key} cannot be negative', errors={key: value})
    return value


def _missed_sentence_ids(finished_sentences):
    missed = []
    for entry in finished_sentences:
        if entry.get('isCorrect'):
            continue
        sentence = entry.get('sentence') or {}
        sentence_id = sentence.get('id')
        if sentence_id is not None and sentence_id not in missed:
            missed.append(sentence_id)
    return missed


class ResultService:
    """Load student tasks and record training results."""

    @staticmethod
    def get_student_task(student_task_id, user):
        """
        Fetch a student task the user may see.

        Students see their own, teachers the ones for tasks they set.
        """
        student_task = db.session.get(StudentTask, student_task_id)
        if student_task is None:
            raise NotFoundError('No student task found with that ID', resource='student_task')
        if user.role == User.ROLE_ADMIN:
            return student_task
        if student_task.student_id == user.user_id:
            return student_task
        if user.is_teacher and student_task.task.set_by == user.user_id:
            return student_task
        raise AuthorizationError('This task belongs to another student')

    @staticmethod
    def submit_results(student_task_id, user, data):
        """
        Store the outcome of a training session and mark the task completed.

        Repeating a task overwrites the previous results.
        """
        student_task = db.session.get(StudentTask, student_task_id)
        if student_task is None:
            raise NotFoundError('No student task found with that ID', resource='student_task')
        if student_task.student_id != user.user_id:
            raise AuthorizationError('You can only submit results for your own tasks')

        correct_count = _non_negative_int(data, 'correctCount')
        wrong_count = _non_negative_int(data, 'wrongCount')
        finished = data.get('finishedSentences') or []
        if not isinstance(finished, list):
            raise ValidationError('finishedSentences must be a list', errors={'finishedSentences': finished})
        if finished and len(finished) != correct_count + wrong_count:
            raise ValidationError(
                'finishedSentences does not match correctCount + wrongCount',
                errors={'finishedSentences': len(finished), 'answered': correct_count + wrong_count},
            )

        student_task.correct_count = correct_count
        student_task.wrong_count = wrong_count
        student_task.finished_sentences = finished
        if data.get('initialCount') is not None:
            student_task.initial_count = _non_negative_int(data, 'initialCount')
        student_task.status = StudentTask.STATUS_COMPLETED
        student_task.completed_at = datetime.now(timezone.utc)
        safe_commit(db.session)

        missed = _missed_sentence_ids(finished)
        current_app.logger.info(
            f"Results stored for student task {student_task_id}: "
            f"{correct_count} right, {wrong_count} wrong, {len(missed)} sentences to revise"
        )
        student_task_completed.send(
            current_app._get_current_object(),
            student_task=student_task,
            missed_sentence_ids=missed,
            today=date.today(),
        )
        return student_task
