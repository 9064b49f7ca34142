from datetime import date, datetime, timezone
from ..core.extensions import db


class RevisionItem(db.Model):
    """Spaced-repetition state of one sentence for one student."""
    __tablename__ = 'revision_items'

    revision_id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    sentence_id = db.Column(db.Integer, db.ForeignKey('sentences.sentence_id'), nullable=False)

    retest_days = db.Column(db.Integer, default=1, nullable=False)
    correct_attempts = db.Column(db.Integer, default=0, nullable=False)
    incorrect_attempts = db.Column(db.Integer, default=0, nullable=False)
    next_due = db.Column(db.Date, default=date.today, index=True)
    last_reviewed = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    sentence = db.relationship('Sentence', lazy='joined')
    student = db.relationship(
        'User',
        backref=db.backref('revision_items', lazy='dynamic', cascade='all, delete-orphan'),
        lazy=True
    )

    __table_args__ = (db.UniqueConstraint('student_id', 'sentence_id', name='uq_revision_student_sentence'),)

    def to_dict(self):
        return {
            'id': self.revision_id,
            'studentId': self.student_id,
            'retestDays': self.retest_days,
            'correctAttempts': self.correct_attempts,
            'incorrectAttempts': self.incorrect_attempts,
            'nextDue': self.next_due.isoformat() if self.next_due else None,
            'lastReviewed': self.last_reviewed.isoformat() if self.last_reviewed else None,
            'sentence': self.sentence.to_dict() if self.sentence else None,
        }
