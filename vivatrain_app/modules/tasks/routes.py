# File: vivatrain_app/modules/tasks/routes.py
from flask import jsonify, request
from flask_login import current_user, login_required

from vivatrain_app.core.error_handlers import success_response
from vivatrain_app.utils.access import teacher_required
from . import tasks_api_bp as blueprint
from .services.task_service import TaskService


@blueprint.route('', methods=['GET'])
@login_required
def list_tasks():
    tasks = TaskService.list_tasks_for(current_user)
    return jsonify(success_response([task.to_dict() for task in tasks], results=len(tasks)))


@blueprint.route('', methods=['POST'])
@login_required
@teacher_required
def create_task():
    data = request.get_json(silent=True) or {}
    task = TaskService.create_task(data, current_user)
    return jsonify(success_response(task.to_dict(), message='Task created')), 201


@blueprint.route('/<int:task_id>', methods=['GET'])
@login_required
def get_task(task_id):
    task = TaskService.get_task(task_id)
    return jsonify(success_response(task.to_dict(include_sentences=True)))


@blueprint.route('/<int:task_id>', methods=['DELETE'])
@login_required
@teacher_required
def delete_task(task_id):
    TaskService.delete_task(task_id, current_user)
    return '', 204
