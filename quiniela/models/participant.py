import datetime

from extensions import db


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class Participant(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    nickname = db.Column(db.String(20), nullable=False)
    # Lowercased nickname; uniqueness is case-insensitive
    nickname_key = db.Column(db.String(20), unique=True, nullable=False)
    pin_hash = db.Column(db.String(255), nullable=True)
    # Stands in for "completion time" in leaderboard tie-breaks
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    predictions = db.relationship(
        "Prediction",
        back_populates="participant",
        cascade="all, delete-orphan",
        order_by="Prediction.question_id",
    )

    def answers_by_question(self):
        return {p.question_id: p.answer for p in self.predictions}

    def to_dict(self):
        return {
            "id": self.id,
            "nickname": self.nickname,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
