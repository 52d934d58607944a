import logging
import threading
from contextlib import contextmanager

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from quiniela.errors import StorageError
from quiniela.models import CorrectAnswer, GameSettings, LogEntry, Participant, Prediction
from quiniela.models.game_settings import SETTINGS_ROW_ID

logger = logging.getLogger(__name__)


class QuinielaStore:
    """
    Data access for participants, predictions, correct answers and settings.

    Every write runs inside transaction(), which holds the store lock for
    the whole unit of work. Leaderboard snapshots take the same lock, so a
    snapshot never mixes correct answers from before and after an edit.
    """

    def __init__(self, db, question_ids, audit_limit=1000):
        self.db = db
        self.question_ids = list(question_ids)
        self.audit_limit = audit_limit
        self.lock = threading.RLock()

    @property
    def session(self):
        return self.db.session

    @contextmanager
    def transaction(self):
        with self.lock:
            try:
                yield self.session
                self.session.commit()
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error("Transaction rolled back: %s", e)
                raise StorageError() from e
            except Exception:
                self.session.rollback()
                raise

    # --- settings ---

    def ensure_settings(self):
        with self.transaction():
            self._settings_row()

    def _settings_row(self):
        settings = self.session.get(GameSettings, SETTINGS_ROW_ID)
        if settings is None:
            settings = GameSettings(id=SETTINGS_ROW_ID, predictions_locked=False, answers_visible=False)
            self.session.add(settings)
            self.session.flush()
        return settings

    def get_settings(self):
        settings = self.session.get(GameSettings, SETTINGS_ROW_ID)
        if settings is None:
            return GameSettings(id=SETTINGS_ROW_ID, predictions_locked=False, answers_visible=False)
        return settings

    def apply_settings(self, changes):
        settings = self._settings_row()
        for key, value in changes.items():
            setattr(settings, key, value)
        self.session.flush()
        return settings

    # --- correct answers ---

    def correct_answers(self):
        rows = self.session.query(CorrectAnswer).order_by(CorrectAnswer.question_id).all()
        return {row.question_id: row.answer for row in rows}

    def correct_answer_records(self):
        return self.session.query(CorrectAnswer).order_by(CorrectAnswer.question_id).all()

    def upsert_correct_answer(self, question_id, answer):
        record = self.session.get(CorrectAnswer, question_id)
        if record is None:
            record = CorrectAnswer(question_id=question_id, answer=answer)
            self.session.add(record)
        else:
            record.answer = answer
        self.session.flush()
        return record

    def delete_correct_answer(self, question_id):
        record = self.session.get(CorrectAnswer, question_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.flush()
        return True

    # --- participants ---

    def get_participant(self, participant_id):
        return self.session.get(Participant, participant_id)

    def find_by_nickname(self, nickname):
        return Participant.query.filter(
            Participant.nickname_key == nickname.strip().lower()
        ).first()

    def participant_count(self):
        return self.session.query(func.count(Participant.id)).scalar() or 0

    def all_participants(self, newest_first=False):
        if newest_first:
            order = (Participant.created_at.desc(), Participant.id.desc())
        else:
            order = (Participant.created_at, Participant.id)
        return (
            Participant.query.options(selectinload(Participant.predictions))
            .order_by(*order)
            .all()
        )

    def add_participant(self, nickname, pin_hash):
        participant = Participant(
            nickname=nickname,
            nickname_key=nickname.lower(),
            pin_hash=pin_hash,
        )
        self.session.add(participant)
        self.session.flush()
        self.ensure_placeholders(participant)
        return participant

    def ensure_placeholders(self, participant):
        """Create an empty prediction for every catalog question the participant lacks."""
        existing = {
            row.question_id
            for row in Prediction.query.filter_by(participant_id=participant.id).all()
        }
        missing = [qid for qid in self.question_ids if qid not in existing]
        for question_id in missing:
            self.session.add(Prediction(participant_id=participant.id, question_id=question_id, answer=None))
        if missing:
            self.session.flush()
        return len(missing)

    def delete_participant(self, participant):
        # ORM cascade removes the predictions in the same flush
        self.session.delete(participant)
        self.session.flush()

    # --- predictions ---

    def predictions_for(self, participant_id):
        rows = Prediction.query.filter_by(participant_id=participant_id) \
            .order_by(Prediction.question_id).all()
        return {row.question_id: row.answer for row in rows}

    def upsert_predictions(self, participant_id, answers):
        existing = {
            row.question_id: row
            for row in Prediction.query.filter(
                Prediction.participant_id == participant_id,
                Prediction.question_id.in_(list(answers.keys())),
            ).all()
        }
        for question_id, answer in answers.items():
            row = existing.get(question_id)
            if row is None:
                self.session.add(Prediction(participant_id=participant_id, question_id=question_id, answer=answer))
            else:
                row.answer = answer
        self.session.flush()
        return len(answers)

    def answer_counts(self):
        """(question_id, answer, count) for every non-empty answer."""
        return (
            self.session.query(Prediction.question_id, Prediction.answer, func.count(Prediction.id))
            .filter(Prediction.answer.isnot(None))
            .group_by(Prediction.question_id, Prediction.answer)
            .order_by(Prediction.question_id, func.count(Prediction.id).desc())
            .all()
        )

    def answering_participant_count(self):
        return (
            self.session.query(func.count(func.distinct(Prediction.participant_id)))
            .filter(Prediction.answer.isnot(None))
            .scalar()
            or 0
        )

    # --- snapshots ---

    def snapshot(self):
        """Participants with their answers plus correct answers, read under the store lock."""
        with self.lock:
            correct = self.correct_answers()
            participants = [
                {
                    "id": p.id,
                    "nickname": p.nickname,
                    "created_at": p.created_at,
                    "predictions": p.answers_by_question(),
                }
                for p in self.all_participants()
            ]
        return participants, correct

    # --- audit ---

    def audit(self, source, message):
        self.session.add(LogEntry(source=source, message=str(message)))
        self.session.flush()
        count = self.session.query(func.count(LogEntry.id)).scalar() or 0
        excess = max(0, count - self.audit_limit)
        if excess > 0:
            old_ids = [row[0] for row in self.session.query(LogEntry.id)
                       .order_by(LogEntry.created_at.asc(), LogEntry.id.asc())
                       .limit(excess)
                       .all()]
            if old_ids:
                LogEntry.query.filter(LogEntry.id.in_(old_ids)) \
                    .delete(synchronize_session=False)

    def recent_logs(self, limit=100):
        return LogEntry.query.order_by(LogEntry.created_at.desc(), LogEntry.id.desc()).limit(limit).all()
