import logging
import re

from werkzeug.security import check_password_hash, generate_password_hash

from quiniela.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from quiniela.services.broadcaster import LEADERBOARD_UPDATE, SETTINGS_UPDATE
from quiniela.services.leaderboard_service import calculate_leaderboard, summarize

logger = logging.getLogger(__name__)

PIN_RE = re.compile(r"^\d{4}$")
NICKNAME_MIN = 2
NICKNAME_MAX = 20
SETTINGS_FIELDS = ("predictions_locked", "answers_visible")


def _parse_id(value, label):
    if isinstance(value, bool):
        raise ValidationError(f"{label} inválido")
    # 5.0 is fine, 5.7 must not silently become 5
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{label} inválido")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} inválido")


def _validate_pin(pin):
    if not isinstance(pin, str) or not PIN_RE.match(pin):
        raise ValidationError("PIN debe ser de 4 dígitos")


class QuinielaService:
    """Operations exposed to the HTTP and Socket.IO layers."""

    def __init__(self, store, gate, broadcaster, catalog, winner_question_id):
        self.store = store
        self.gate = gate
        self.broadcaster = broadcaster
        self.catalog = catalog
        self.winner_question_id = winner_question_id

    # ------------------------------------------------------------------
    # Leaderboard
    # ------------------------------------------------------------------

    def _rank(self, participants, correct_answers):
        return calculate_leaderboard(
            participants, correct_answers, self.catalog.ids, self.winner_question_id
        )

    def compute_leaderboard(self):
        participants, correct = self.store.snapshot()
        entries = self._rank(participants, correct)
        return entries, correct

    def get_leaderboard(self):
        entries, correct = self.compute_leaderboard()
        settings = self.store.get_settings().to_dict()
        result = {
            "leaderboard": entries,
            "settings": settings,
            "correct_answers": correct if settings["answers_visible"] else {},
        }
        result.update(summarize(entries, correct))
        return result

    def get_user_position(self, participant_id):
        participant_id = _parse_id(participant_id, "Usuario")
        entries, _ = self.compute_leaderboard()
        for entry in entries:
            if entry["id"] == participant_id:
                return entry
        raise NotFoundError("Usuario no encontrado en el leaderboard")

    def _leaderboard_event(self, updated_question):
        entries, correct = self.compute_leaderboard()
        payload = {
            "leaderboard": entries,
            "correct_answers": correct,
            "updated_question": updated_question,
        }
        payload.update(summarize(entries, correct))
        return payload

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def _clean_nickname(self, nickname):
        if not isinstance(nickname, str) or len(nickname.strip()) < NICKNAME_MIN:
            raise ValidationError("Nickname debe tener al menos 2 caracteres")
        nickname = nickname.strip()
        if len(nickname) > NICKNAME_MAX:
            raise ValidationError("Nickname debe tener máximo 20 caracteres")
        return nickname

    def check_nickname(self, nickname):
        nickname = self._clean_nickname(nickname)
        participant = self.store.find_by_nickname(nickname)
        if participant is None:
            return {"exists": False}
        return {"exists": True, "has_pin": participant.pin_hash is not None}

    def register_participant(self, nickname, pin):
        nickname = self._clean_nickname(nickname)
        _validate_pin(pin)

        try:
            with self.store.transaction():
                self.gate.ensure_open()
                if self.store.find_by_nickname(nickname) is not None:
                    raise ConflictError()
                participant = self.store.add_participant(nickname, generate_password_hash(pin))
                self.store.audit("player", f"register:{participant.id}:{nickname}")
                result = participant.to_dict()
        except StorageError as e:
            # Unique index on the lowercased nickname lost a race
            if "UNIQUE" in str(e.__cause__).upper() or "DUPLICATE" in str(e.__cause__).upper():
                raise ConflictError() from e
            raise

        logger.info("Participant %s registered as %r", result["id"], nickname)
        return result

    def login(self, nickname, pin):
        if not nickname or not pin:
            raise ValidationError("Nickname y PIN son requeridos")
        if not isinstance(nickname, str) or not isinstance(pin, str):
            raise ValidationError("Nickname y PIN son requeridos")

        with self.store.transaction():
            participant = self.store.find_by_nickname(nickname)
            if participant is None:
                raise NotFoundError("Usuario no encontrado")
            if participant.pin_hash is None:
                # Older accounts get the first PIN they log in with
                _validate_pin(pin)
                participant.pin_hash = generate_password_hash(pin)
            elif not check_password_hash(participant.pin_hash, pin):
                raise AuthenticationError("PIN incorrecto")
            self.store.ensure_placeholders(participant)
            result = participant.to_dict()
        return result

    def participant_count(self):
        return self.store.participant_count()

    def list_participants(self):
        participants = []
        for p in self.store.all_participants(newest_first=True):
            answers = p.answers_by_question()
            answered = sum(1 for qid in self.catalog.ids if answers.get(qid) is not None)
            participants.append({
                "id": p.id,
                "nickname": p.nickname,
                "created_at": p.created_at.isoformat(),
                "answered_count": answered,
                "complete": answered == len(self.catalog),
                "predictions": [
                    {"question_id": qid, "answer": answer}
                    for qid, answer in sorted(answers.items())
                ],
            })
        return participants

    def delete_participant(self, participant_id):
        participant_id = _parse_id(participant_id, "Usuario")
        with self.store.lock:
            with self.store.transaction():
                participant = self.store.get_participant(participant_id)
                if participant is None:
                    raise NotFoundError("Usuario no encontrado")
                nickname = participant.nickname
                self.store.delete_participant(participant)
                self.store.audit("admin", f"delete_participant:{participant_id}:{nickname}")
                payload = self._leaderboard_event(None)
            self.broadcaster.publish(LEADERBOARD_UPDATE, payload)
        logger.info("Participant %s (%s) deleted", participant_id, nickname)
        return {"id": participant_id, "nickname": nickname}

    def reset_participant_pin(self, participant_id, new_pin):
        participant_id = _parse_id(participant_id, "Usuario")
        _validate_pin(new_pin)
        with self.store.transaction():
            participant = self.store.get_participant(participant_id)
            if participant is None:
                raise NotFoundError("Usuario no encontrado")
            participant.pin_hash = generate_password_hash(new_pin)
            self.store.audit("admin", f"reset_pin:{participant_id}")
            nickname = participant.nickname
        return {"id": participant_id, "nickname": nickname}

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def _validate_predictions(self, predictions):
        if not isinstance(predictions, dict):
            raise ValidationError("userId y predictions son requeridos")

        cleaned = {}
        for raw_id, answer in predictions.items():
            question_id = _parse_id(raw_id, "Pregunta")
            question = self.catalog.get(question_id)
            if question is None:
                raise NotFoundError(f"Pregunta {question_id} no existe")
            if answer is not None and not question.accepts(answer):
                raise ValidationError(f"Respuesta inválida para la pregunta {question_id}")
            cleaned[question_id] = answer
        return cleaned

    def submit_predictions(self, participant_id, predictions):
        if participant_id is None or participant_id == "":
            raise ValidationError("userId y predictions son requeridos")
        participant_id = _parse_id(participant_id, "Usuario")
        answers = self._validate_predictions(predictions)

        with self.store.transaction():
            self.gate.ensure_open()
            if self.store.get_participant(participant_id) is None:
                raise NotFoundError("Usuario no encontrado")
            saved = self.store.upsert_predictions(participant_id, answers)

        logger.debug("Saved %d predictions for participant %s", saved, participant_id)
        return {"saved": saved}

    def get_predictions(self, participant_id):
        participant_id = _parse_id(participant_id, "Usuario")
        return self.store.predictions_for(participant_id)

    def prediction_progress(self, participant_id):
        answers = self.get_predictions(participant_id)
        count = sum(1 for qid in self.catalog.ids if answers.get(qid) is not None)
        total = len(self.catalog)
        return {"complete": count >= total, "count": count, "total": total}

    def get_distributions(self):
        distributions = {}
        for question_id, answer, count in self.store.answer_counts():
            dist = distributions.setdefault(question_id, {"total": 0, "options": {}})
            dist["total"] += count
            dist["options"][answer] = {"count": count, "percentage": 0}

        for dist in distributions.values():
            for option in dist["options"].values():
                option["percentage"] = round(option["count"] / dist["total"] * 100, 1) if dist["total"] else 0

        return {
            "distributions": distributions,
            "total_participants": self.store.answering_participant_count(),
        }

    # ------------------------------------------------------------------
    # Correct answers & settings (operator)
    # ------------------------------------------------------------------

    def _catalog_question(self, question_id):
        question_id = _parse_id(question_id, "Pregunta")
        question = self.catalog.get(question_id)
        if question is None:
            raise NotFoundError(f"Pregunta {question_id} no existe")
        return question

    def mark_correct_answer(self, question_id, answer):
        question = self._catalog_question(question_id)
        if not answer:
            raise ValidationError("Respuesta requerida")
        if not question.accepts(answer):
            raise ValidationError(f"Respuesta inválida para la pregunta {question.id}")

        # Holding the store lock keeps broadcasts in commit order
        with self.store.lock:
            with self.store.transaction():
                self.store.upsert_correct_answer(question.id, answer)
                self.store.audit("admin", f"mark_answer:{question.id}={answer}")
                payload = self._leaderboard_event(question.id)
            self.broadcaster.publish(LEADERBOARD_UPDATE, payload)
        logger.info("Question %s marked correct: %r", question.id, answer)
        return payload

    def remove_correct_answer(self, question_id):
        question = self._catalog_question(question_id)

        with self.store.lock:
            with self.store.transaction():
                if not self.store.delete_correct_answer(question.id):
                    raise NotFoundError(f"La pregunta {question.id} no tiene respuesta marcada")
                self.store.audit("admin", f"remove_answer:{question.id}")
                payload = self._leaderboard_event(question.id)
            self.broadcaster.publish(LEADERBOARD_UPDATE, payload)
        logger.info("Correct answer for question %s removed", question.id)
        return payload

    def list_correct_answers(self):
        return {
            record.question_id: {
                "answer": record.answer,
                "updated_at": record.updated_at.isoformat(),
            }
            for record in self.store.correct_answer_records()
        }

    def get_settings(self):
        return self.store.get_settings().to_dict()

    def get_public_answers(self):
        if not self.store.get_settings().answers_visible:
            return {}
        return self.store.correct_answers()

    def update_settings(self, changes):
        if not isinstance(changes, dict):
            raise ValidationError("Configuración inválida")
        unknown = set(changes) - set(SETTINGS_FIELDS)
        if unknown:
            raise ValidationError(f"Campo desconocido: {', '.join(sorted(unknown))}")
        cleaned = {}
        for key, value in changes.items():
            if value is None:
                continue
            if not isinstance(value, bool):
                raise ValidationError(f"{key} debe ser true o false")
            cleaned[key] = value

        with self.store.lock:
            with self.store.transaction():
                settings = self.store.apply_settings(cleaned).to_dict()
                if cleaned:
                    self.store.audit("admin", "settings:" + ",".join(
                        f"{k}={v}" for k, v in sorted(cleaned.items())
                    ))
            if cleaned:
                self.broadcaster.publish(SETTINGS_UPDATE, settings)
        if cleaned:
            logger.info("Settings updated: %s", settings)
        return settings

    def recent_logs(self, limit=100):
        limit = max(1, min(_parse_id(limit, "Límite"), 1000))
        return [entry.to_dict() for entry in self.store.recent_logs(limit)]
