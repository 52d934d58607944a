from extensions import db
from .participant import utcnow


class Prediction(db.Model):
    """One answer slot per (participant, question). A NULL answer means not answered yet."""
    id = db.Column(db.Integer, primary_key=True)
    participant_id = db.Column(
        db.Integer, db.ForeignKey("participant.id", ondelete="CASCADE"), nullable=False
    )
    question_id = db.Column(db.Integer, nullable=False)
    answer = db.Column(db.String(200), nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    participant = db.relationship("Participant", back_populates="predictions")

    __table_args__ = (
        db.UniqueConstraint("participant_id", "question_id", name="uq_prediction_participant_question"),
        db.Index("ix_prediction_participant", "participant_id"),
        db.Index("ix_prediction_question", "question_id"),
    )
