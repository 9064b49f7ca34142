# File: vivatrain_app/modules/sentences/routes.py
from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from vivatrain_app.core.error_handlers import success_response
from vivatrain_app.utils.access import teacher_required
from . import sentences_api_bp as blueprint
from .logics.sentence_filter import parse_sentence_query
from .services.sentence_service import SentenceService


@blueprint.route('', methods=['GET'])
@login_required
def list_sentences():
    """Search sentences by level, tense, grammar, vivaRef and free text."""
    criteria = parse_sentence_query(request.args, max_limit=current_app.config['SENTENCE_QUERY_MAX_LIMIT'])
    sentences = SentenceService.search(criteria)
    return jsonify(success_response([s.to_dict() for s in sentences], results=len(sentences)))


@blueprint.route('', methods=['POST'])
@login_required
@teacher_required
def create_sentence():
    data = request.get_json(silent=True) or {}
    sentence = SentenceService.create(data, user_id=current_user.user_id)
    return jsonify(success_response(sentence.to_dict())), 201


@blueprint.route('/<int:sentence_id>', methods=['GET'])
@login_required
def get_sentence(sentence_id):
    return jsonify(success_response(SentenceService.get(sentence_id).to_dict()))


@blueprint.route('/<int:sentence_id>', methods=['PATCH'])
@login_required
@teacher_required
def update_sentence(sentence_id):
    data = request.get_json(silent=True) or {}
    sentence = SentenceService.update(sentence_id, data)
    return jsonify(success_response(sentence.to_dict()))
