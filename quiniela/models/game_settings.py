from extensions import db

SETTINGS_ROW_ID = 1


class GameSettings(db.Model):
    __tablename__ = "game_settings"

    id = db.Column(db.Integer, primary_key=True, default=SETTINGS_ROW_ID)
    predictions_locked = db.Column(db.Boolean, nullable=False, default=False)
    answers_visible = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "predictions_locked": bool(self.predictions_locked),
            "answers_visible": bool(self.answers_visible),
        }
