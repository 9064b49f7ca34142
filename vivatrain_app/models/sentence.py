from datetime import datetime, timezone
from ..core.extensions import db


class Sentence(db.Model):
    """A sentence pair a teacher wrote for students to train on."""
    __tablename__ = 'sentences'

    sentence_id = db.Column(db.Integer, primary_key=True)
    sentence = db.Column(db.Text, nullable=False)
    translation = db.Column(db.Text, nullable=False)

    # Filter metadata
    level = db.Column(db.String(20), index=True)
    viva_ref = db.Column(db.String(50), index=True)  # textbook unit/page
    tense = db.Column(db.String(50), index=True)
    grammar = db.Column(db.String(100), index=True)

    audio_url = db.Column(db.String(255), nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            'id': self.sentence_id,
            'sentence': self.sentence,
            'translation': self.translation,
            'level': self.level,
            'vivaRef': self.viva_ref,
            'tense': self.tense,
            'grammar': self.grammar,
            'audioUrl': self.audio_url,
        }
