from datetime import date

from flask import current_app

from vivatrain_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from vivatrain_app.core.extensions import db
from vivatrain_app.core.signals import task_created, task_deleted
from vivatrain_app.models import SchoolClass, Sentence, StudentTask, Task, TaskSentence, User
from vivatrain_app.utils.db_session import safe_commit


class TaskService:
    """
    Service layer for setting, listing and deleting tasks.
    Creating a task for a class hands every student in it a StudentTask.
    """

    @staticmethod
    def _parse_sentence_ids(raw):
        if not isinstance(raw, list) or not raw:
            raise ValidationError('A task must contain at least one sentence', errors={'sentences': raw})
        ids = []
        for value in raw:
            try:
                sentence_id = int(value)
            except (TypeError, ValueError):
                raise ValidationError('Sentence ids must be integers', errors={'sentences': raw})
            # Keep the first occurrence, preserving order
            if sentence_id not in ids:
                ids.append(sentence_id)
        return ids

    @staticmethod
    def _parse_due_date(raw):
        if not raw:
            return None
        try:
            return date.fromisoformat(str(raw)[:10])
        except ValueError:
            raise ValidationError('dueDate must be an ISO date (YYYY-MM-DD)', errors={'dueDate': raw})

    @staticmethod
    def _resolve_class(raw_class_id, teacher):
        if raw_class_id in (None, ''):
            return None
        try:
            class_id = int(raw_class_id)
        except (TypeError, ValueError):
            raise ValidationError('classId must be an integer', errors={'classId': raw_class_id})
        school_class = db.session.get(SchoolClass, class_id)
        if school_class is None:
            raise NotFoundError('No class found with that ID', resource='class')
        if school_class.teacher_id != teacher.user_id and teacher.role != User.ROLE_ADMIN:
            raise AuthorizationError('You can only set tasks for your own classes')
        return school_class

    @staticmethod
    def create_task(data, teacher):
        """
        Create a task from a camelCase payload and assign it to the class.

        Returns:
            The new Task.
        Raises:
            ValidationError, NotFoundError, AuthorizationError
        """
        title = (data.get('title') or '').strip()
        if not title:
            raise ValidationError('A task must have a title', errors={'title': 'required'})

        exercise_type = data.get('exerciseType') or 'translation'
        if exercise_type not in Task.EXERCISE_TYPES:
            raise ValidationError(
                f"exerciseType must be one of {', '.join(Task.EXERCISE_TYPES)}",
                errors={'exerciseType': exercise_type},
            )

        sentence_ids = TaskService._parse_sentence_ids(data.get('sentences'))
        sentences = {s.sentence_id: s for s in Sentence.query.filter(Sentence.sentence_id.in_(sentence_ids)).all()}
        missing = [sentence_id for sentence_id in sentence_ids if sentence_id not in sentences]
        if missing:
            raise ValidationError('Some sentences do not exist', errors={'sentences': missing})

        school_class = TaskService._resolve_class(data.get('classId'), teacher)

        task = Task(
            title=title,
            exercise_type=exercise_type,
            due_date=TaskService._parse_due_date(data.get('dueDate')),
            set_by=teacher.user_id,
            school_class=school_class,
        )
        for sentence_id in sentence_ids:
            task.sentence_links.append(TaskSentence(sentence=sentences[sentence_id]))
        db.session.add(task)

        assigned = 0
        if school_class is not None:
            for student in school_class.students:
                if student.role == User.ROLE_STUDENT:
                    db.session.add(StudentTask(student=student, task=task, initial_count=len(sentence_ids)))
                    assigned += 1

        safe_commit(db.session)
        current_app.logger.info(
            f"Task {task.task_id} '{title}' created by {teacher.user_id}, assigned to {assigned} students"
        )
        task_created.send(current_app._get_current_object(), task=task, assigned_count=assigned)
        return task

    @staticmethod
    def get_task(task_id):
        task = db.session.get(Task, task_id)
        if task is None:
            raise NotFoundError('No task found with that ID', resource='task')
        return task

    @staticmethod
    def delete_task(task_id, user):
        task = TaskService.get_task(task_id)
        if task.set_by != user.user_id and user.role != User.ROLE_ADMIN:
            raise AuthorizationError('You can only delete tasks you set')
        db.session.delete(task)
        safe_commit(db.session)
        current_app.logger.info(f"Task {task_id} deleted by {user.user_id}")
        task_deleted.send(current_app._get_current_object(), task_id=task_id, user_id=user.user_id)

    @staticmethod
    def list_tasks_for(user):
        """Teachers see the tasks they set, students the tasks assigned to them."""
        if user.is_teacher:
            return Task.query.filter_by(set_by=user.user_id).order_by(Task.created_at.desc()).all()
        return [st.task for st in TaskService.student_tasks_for(user)]

    @staticmethod
    def student_tasks_for(user, status=None):
        query = StudentTask.query.filter_by(student_id=user.user_id)
        if status:
            query = query.filter_by(status=status)
        return query.order_by(StudentTask.student_task_id.desc()).all()
