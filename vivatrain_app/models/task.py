from datetime import datetime, timezone
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.types import JSON
from ..core.extensions import db


class TaskSentence(db.Model):
    """Ordered association between a task and its sentences."""
    __tablename__ = 'task_sentences'

    task_id = db.Column(db.Integer, db.ForeignKey('tasks.task_id'), primary_key=True)
    sentence_id = db.Column(db.Integer, db.ForeignKey('sentences.sentence_id'), primary_key=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    sentence = db.relationship('Sentence', lazy='joined')


class Task(db.Model):
    """A set of sentences a teacher assigns to a class."""
    __tablename__ = 'tasks'

    EXERCISE_TYPES = ('translation', 'reverse_translation', 'cloze', 'audio')

    task_id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    exercise_type = db.Column(db.String(30), nullable=False, default='translation')
    due_date = db.Column(db.Date, nullable=True)
    set_by = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    class_id = db.Column(db.Integer, db.ForeignKey('school_classes.class_id'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    sentence_links = db.relationship(
        'TaskSentence',
        order_by='TaskSentence.position',
        collection_class=ordering_list('position'),
        cascade='all, delete-orphan',
        lazy=True,
    )
    student_tasks = db.relationship('StudentTask', back_populates='task', cascade='all, delete-orphan', lazy=True)
    teacher = db.relationship('User', foreign_keys=[set_by], lazy=True)
    school_class = db.relationship('SchoolClass', lazy=True)

    @property
    def sentences(self):
        return [link.sentence for link in self.sentence_links]

    def to_dict(self, include_sentences=False):
        data = {
            'id': self.task_id,
            'title': self.title,
            'exerciseType': self.exercise_type,
            'dueDate': self.due_date.isoformat() if self.due_date else None,
            'setBy': self.set_by,
            'classId': self.class_id,
            'sentenceIds': [link.sentence_id for link in self.sentence_links],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if include_sentences:
            data['sentences'] = [sentence.to_dict() for sentence in self.sentences]
        return data


class StudentTask(db.Model):
    """One student's copy of a task, holding their results."""
    __tablename__ = 'student_tasks'

    STATUS_SET = 'set'
    STATUS_COMPLETED = 'completed'

    student_task_id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.task_id'), nullable=False, index=True)
    status = db.Column(db.String(20), default=STATUS_SET, nullable=False)

    # Results
    correct_count = db.Column(db.Integer, default=0)
    wrong_count = db.Column(db.Integer, default=0)
    initial_count = db.Column(db.Integer, default=0)
    finished_sentences = db.Column(JSON, default=list)
    completed_at = db.Column(db.DateTime(timezone=True))

    task = db.relationship('Task', back_populates='student_tasks')
    student = db.relationship(
        'User',
        backref=db.backref('student_tasks', lazy='dynamic', cascade='all, delete-orphan'),
        lazy=True
    )

    __table_args__ = (db.UniqueConstraint('student_id', 'task_id', name='uq_student_task'),)

    @property
    def is_completed(self):
        return self.status == self.STATUS_COMPLETED

    @property
    def score_percentage(self):
        answered = (self.correct_count or 0) + (self.wrong_count or 0)
        if not answered:
            return 0
        return int(round((self.correct_count or 0) * 100 / answered))

    def to_dict(self, include_sentences=False):
        return {
            'id': self.student_task_id,
            'studentId': self.student_id,
            'status': self.status,
            'correctCount': self.correct_count,
            'wrongCount': self.wrong_count,
            'initialCount': self.initial_count,
            'finishedSentences': self.finished_sentences or [],
            'completedAt': self.completed_at.isoformat() if self.completed_at else None,
            'task': self.task.to_dict(include_sentences=include_sentences) if self.task else None,
        }
