import logging

from flask import session
from flask_socketio import emit

from quiniela.errors import QuinielaError, ValidationError
from quiniela.services import get_service

logger = logging.getLogger(__name__)


def _payload(data):
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Datos inválidos")
    return data


def _run_admin_action(action, ack_event):
    if not session.get("admin"):
        emit("admin_error", {"status": "error", "msg": "PIN requerido"})
        return
    try:
        result = action()
    except QuinielaError as e:
        logger.warning("Operator socket action failed: %s", e.message)
        emit("admin_error", e.to_dict())
        return
    emit(ack_event, {"status": "ok", "result": result})


def register_admin_events(socketio):

    @socketio.on("admin_mark_answer")
    def handle_mark_answer(data=None):
        def action():
            payload = _payload(data)
            return get_service().mark_correct_answer(payload.get("question_id"), payload.get("answer"))
        _run_admin_action(action, "admin_answer_ack")

    @socketio.on("admin_remove_answer")
    def handle_remove_answer(data=None):
        def action():
            return get_service().remove_correct_answer(_payload(data).get("question_id"))
        _run_admin_action(action, "admin_answer_ack")

    @socketio.on("admin_update_settings")
    def handle_update_settings(data=None):
        _run_admin_action(
            lambda: get_service().update_settings(_payload(data)),
            "admin_settings_ack",
        )
