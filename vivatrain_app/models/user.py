from __future__ import annotations
from datetime import datetime, timezone
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash
from ..core.extensions import db


class SchoolClass(db.Model):
    """A teacher's class. Students join it at signup with the class code."""
    __tablename__ = 'school_classes'

    class_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    class_code = db.Column(db.String(32), unique=True, nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    teacher = db.relationship('User', foreign_keys=[teacher_id], backref=db.backref('taught_classes', lazy=True))
    students = db.relationship('User', foreign_keys='User.class_id', back_populates='school_class', lazy=True)

    def to_dict(self):
        return {
            'id': self.class_id,
            'name': self.name,
            'classCode': self.class_code,
            'teacherId': self.teacher_id,
            'studentCount': len(self.students),
        }


class User(UserMixin, db.Model):
    """Application user model."""
    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_TEACHER = 'teacher'
    ROLE_STUDENT = 'student'
    ROLE_LABELS = {
        ROLE_ADMIN: 'Administrator',
        ROLE_TEACHER: 'Teacher',
        ROLE_STUDENT: 'Student',
    }

    user_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), default=ROLE_STUDENT, nullable=False)
    class_id = db.Column(db.Integer, db.ForeignKey('school_classes.class_id', use_alter=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    last_seen = db.Column(db.DateTime(timezone=True))

    school_class = db.relationship('SchoolClass', foreign_keys=[class_id], back_populates='students')

    def get_id(self):
        return str(self.user_id)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_teacher(self) -> bool:
        return self.role in (self.ROLE_TEACHER, self.ROLE_ADMIN)

    @property
    def role_label(self) -> str:
        return self.ROLE_LABELS.get(self.role, self.role)

    def to_dict(self):
        return {
            'id': self.user_id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'classId': self.class_id,
        }
