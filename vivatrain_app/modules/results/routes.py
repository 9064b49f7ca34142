# File: vivatrain_app/modules/results/routes.py
from flask import jsonify, request
from flask_login import current_user, login_required

from vivatrain_app.core.error_handlers import success_response
from vivatrain_app.modules.tasks.services.task_service import TaskService
from . import revision_api_bp, student_tasks_api_bp
from .services.result_service import ResultService
from .services.revision_service import RevisionService


@student_tasks_api_bp.route('', methods=['GET'])
@login_required
def list_student_tasks():
    student_tasks = TaskService.student_tasks_for(current_user, status=request.args.get('status'))
    return jsonify(success_response([st.to_dict() for st in student_tasks], results=len(student_tasks)))


@student_tasks_api_bp.route('/<int:student_task_id>', methods=['GET'])
@login_required
def get_student_task(student_task_id):
    student_task = ResultService.get_student_task(student_task_id, current_user)
    return jsonify(success_response(student_task.to_dict(include_sentences=True)))


@student_tasks_api_bp.route('/<int:student_task_id>/results', methods=['POST'])
@login_required
def submit_results(student_task_id):
    data = request.get_json(silent=True) or {}
    student_task = ResultService.submit_results(student_task_id, current_user, data)
    return jsonify(success_response(student_task.to_dict(), message='Results saved'))


@revision_api_bp.route('', methods=['GET'])
@login_required
def list_due_revision():
    items = RevisionService.list_due(current_user.user_id)
    return jsonify(success_response([item.to_dict() for item in items], results=len(items)))


@revision_api_bp.route('/<int:revision_id>', methods=['PATCH'])
@login_required
def update_revision_item(revision_id):
    data = request.get_json(silent=True) or {}
    item = RevisionService.update_item(revision_id, current_user, data)
    return jsonify(success_response(item.to_dict()))
