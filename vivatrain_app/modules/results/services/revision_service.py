from datetime import date, datetime, timedelta, timezone

from flask import current_app

from vivatrain_app.core.error_handlers import AuthorizationError, NotFoundError, ValidationError
from vivatrain_app.core.extensions import db
from vivatrain_app.core.signals import revision_item_updated
from vivatrain_app.logics.revision_schedule import RevisionConstants
from vivatrain_app.models import RevisionItem, Sentence
from vivatrain_app.utils.db_session import safe_commit

UPDATABLE_COUNTERS = {
    'correctAttempts': 'correct_attempts',
    'incorrectAttempts': 'incorrect_attempts',
}


class RevisionService:
    """Persist and query students' revision items."""

    @staticmethod
    def list_due(student_id, today=None):
        today = today or date.today()
        return (
            RevisionItem.query.filter(RevisionItem.student_id == student_id, RevisionItem.next_due <= today)
            .order_by(RevisionItem.next_due, RevisionItem.revision_id)
            .all()
        )

    @staticmethod
    def seed_missed(student_id, sentence_ids, today=None):
        """
        Put missed sentences on the student's revision list.

        Sentences already on it come due again with the interval reset.
        Returns the number of new revision items.
        """
        today = today or date.today()
        initial_days = current_app.config.get('REVISION_INITIAL_RETEST_DAYS', RevisionConstants.MIN_RETEST_DAYS)
        existing = {
            item.sentence_id: item
            for item in RevisionItem.query.filter(
                RevisionItem.student_id == student_id, RevisionItem.sentence_id.in_(sentence_ids)
            ).all()
        }
        created = 0
        for sentence_id in sentence_ids:
            item = existing.get(sentence_id)
            if item is not None:
                item.retest_days = RevisionConstants.RESET_RETEST_DAYS
                item.next_due = today
                continue
            if db.session.get(Sentence, sentence_id) is None:
                current_app.logger.warning(f"Skipping revision for unknown sentence {sentence_id}")
                continue
            db.session.add(RevisionItem(
                student_id=student_id,
                sentence_id=sentence_id,
                retest_days=initial_days,
                next_due=today,
            ))
            created += 1
        safe_commit(db.session)
        return created

    @staticmethod
    def update_item(revision_id, user, data):
        """Apply a schedule computed by the revision session."""
        item = db.session.get(RevisionItem, revision_id)
        if item is None:
            raise NotFoundError('No revision item found with that ID', resource='revision_item')
        if item.student_id != user.user_id:
            raise AuthorizationError('This revision item belongs to another student')

        if 'retestDays' in data:
            try:
                retest_days = int(data['retestDays'])
            except (TypeError, ValueError):
                raise ValidationError('retestDays must be a whole number', errors={'retestDays': data['retestDays']})
            if retest_days < RevisionConstants.MIN_RETEST_DAYS:
                raise ValidationError('retestDays must be at least 1', errors={'retestDays': retest_days})
            item.retest_days = retest_days

        for key, attribute in UPDATABLE_COUNTERS.items():
            if key in data:
                try:
                    value = int(data[key])
                except (TypeError, ValueError):
                    raise ValidationError(f'{key} must be a whole number', errors={key: data[key]})
                if value < 0:
                    raise ValidationError(f'{key} cannot be negative', errors={key: value})
                setattr(item, attribute, value)

        now = datetime.now(timezone.utc)
        if data.get('nextDue'):
            try:
                item.next_due = date.fromisoformat(str(data['nextDue'])[:10])
            except ValueError:
                raise ValidationError('nextDue must be an ISO date', errors={'nextDue': data['nextDue']})
        else:
            item.next_due = now.date() + timedelta(days=item.retest_days)
        item.last_reviewed = now

        safe_commit(db.session)
        revision_item_updated.send(current_app._get_current_object(), revision_item=item)
        return item
