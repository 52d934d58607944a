from extensions import db
from .participant import utcnow


class CorrectAnswer(db.Model):
    __tablename__ = "correct_answer"

    question_id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    answer = db.Column(db.String(200), nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
