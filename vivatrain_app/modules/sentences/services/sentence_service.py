from flask import current_app
from sqlalchemy import func, or_

from vivatrain_app.core.error_handlers import NotFoundError, ValidationError
from vivatrain_app.core.extensions import db
from vivatrain_app.core.signals import sentence_created
from vivatrain_app.models import Sentence
from vivatrain_app.utils.db_session import safe_commit
from ..logics.sentence_filter import SentenceQuery

EDITABLE_FIELDS = {
    'sentence': 'sentence',
    'translation': 'translation',
    'level': 'level',
    'vivaRef': 'viva_ref',
    'tense': 'tense',
    'grammar': 'grammar',
    'audioUrl': 'audio_url',
}


class SentenceService:
    """Service layer for sentence search and authoring."""

    @staticmethod
    def search(criteria: SentenceQuery):
        """Return sentences matching the criteria, in id order unless random."""
        query = Sentence.query
        for column, values in criteria.filters.items():
            query = query.filter(getattr(Sentence, column).in_(values))

        if criteria.search:
            pattern = f"%{criteria.search}%"
            query = query.filter(or_(Sentence.sentence.ilike(pattern), Sentence.translation.ilike(pattern)))

        if criteria.exclude_ids:
            query = query.filter(~Sentence.sentence_id.in_(criteria.exclude_ids))

        if criteria.random:
            query = query.order_by(func.random())
        else:
            query = query.order_by(Sentence.sentence_id)

        return query.limit(criteria.limit).all()

    @staticmethod
    def get(sentence_id):
        sentence = db.session.get(Sentence, sentence_id)
        if sentence is None:
            raise NotFoundError('No sentence found with that ID', resource='sentence')
        return sentence

    @staticmethod
    def create(data, user_id=None):
        """
        Create a sentence from a camelCase payload.

        Raises:
            ValidationError when sentence or translation is missing.
        """
        errors = {}
        for required in ('sentence', 'translation'):
            if not (data.get(required) or '').strip():
                errors[required] = f'A sentence must have a {required}.'
        if errors:
            raise ValidationError(next(iter(errors.values())), errors=errors)

        sentence = Sentence(created_by=user_id)
        SentenceService._apply(sentence, data)
        db.session.add(sentence)
        safe_commit(db.session)

        current_app.logger.info(f"Sentence created: {sentence.sentence_id} by user {user_id}")
        sentence_created.send(current_app._get_current_object(), sentence=sentence)
        return sentence

    @staticmethod
    def update(sentence_id, data):
        sentence = SentenceService.get(sentence_id)
        for required in ('sentence', 'translation'):
            if required in data and not (data.get(required) or '').strip():
                raise ValidationError(f'A sentence must have a {required}.', errors={required: 'empty'})
        SentenceService._apply(sentence, data)
        safe_commit(db.session)
        return sentence

    @staticmethod
    def _apply(sentence, data):
        for key, attribute in EDITABLE_FIELDS.items():
            if key in data:
                value = data[key]
                if isinstance(value, str):
                    value = value.strip() or None
                setattr(sentence, attribute, value)

    @staticmethod
    def distinct_values(column_name):
        """Values present for a filter column, for populating form selects."""
        column = getattr(Sentence, column_name)
        rows = db.session.query(column).filter(column.isnot(None)).distinct().order_by(column).all()
        return [row[0] for row in rows]
