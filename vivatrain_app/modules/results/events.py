from flask import current_app

from vivatrain_app.core.signals import student_task_completed
from .services.revision_service import RevisionService


@student_task_completed.connect
def handle_student_task_completed(sender, **kwargs):
    """
    Put every sentence the student missed on their revision list.
    """
    student_task = kwargs.get('student_task')
    missed = kwargs.get('missed_sentence_ids') or []
    if student_task is None or not missed:
        return

    created = RevisionService.seed_missed(student_task.student_id, missed, today=kwargs.get('today'))
    current_app.logger.info(
        f"[RevisionEvent] {created} new revision items for student {student_task.student_id}"
    )
