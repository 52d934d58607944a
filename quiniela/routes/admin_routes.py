import hmac
import logging
from functools import wraps

from flask import Blueprint, current_app, jsonify, request, session

from quiniela.errors import AuthenticationError, ValidationError
from quiniela.services import get_service
from .user_routes import json_body

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


def pin_matches(pin):
    expected = current_app.config["ADMIN_PIN"]
    return isinstance(pin, str) and hmac.compare_digest(pin.encode(), expected.encode())


# -------------------
# LOGIN REQUIRED
# -------------------
def admin_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        if session.get("admin"):
            return f(*args, **kwargs)
        pin = request.headers.get("X-Admin-Pin")
        if not pin:
            raise AuthenticationError("PIN requerido")
        if not pin_matches(pin):
            raise AuthenticationError("PIN incorrecto", status_code=403)
        return f(*args, **kwargs)
    return wrapped


# -------------------
# LOGIN / LOGOUT
# -------------------
@admin_bp.route("/verify", methods=["POST"])
def verify():
    pin = json_body().get("pin")
    if not pin:
        raise ValidationError("PIN requerido")
    if not pin_matches(pin):
        logger.warning("Rejected operator PIN from %s", request.remote_addr)
        raise AuthenticationError("PIN incorrecto", status_code=403)
    session["admin"] = True
    return jsonify({"status": "ok", "msg": "PIN correcto"})


@admin_bp.route("/logout", methods=["POST"])
def logout():
    session.pop("admin", None)
    return jsonify({"status": "ok"})


# -------------------
# SETTINGS
# -------------------
@admin_bp.route("/settings", methods=["GET"])
@admin_required
def get_settings():
    return jsonify(get_service().get_settings())


@admin_bp.route("/settings", methods=["PUT"])
@admin_required
def update_settings():
    return jsonify(get_service().update_settings(json_body()))


# -------------------
# CORRECT ANSWERS
# -------------------
@admin_bp.route("/answers", methods=["GET"])
@admin_required
def list_answers():
    return jsonify(get_service().list_correct_answers())


@admin_bp.route("/answers/<question_id>", methods=["POST"])
@admin_required
def mark_answer(question_id):
    answer = json_body().get("answer")
    snapshot = get_service().mark_correct_answer(question_id, answer)
    return jsonify({"status": "ok", "question_id": snapshot["updated_question"], "answer": answer, **snapshot})


@admin_bp.route("/answers/<question_id>", methods=["DELETE"])
@admin_required
def remove_answer(question_id):
    snapshot = get_service().remove_correct_answer(question_id)
    return jsonify({"status": "ok", "question_id": snapshot["updated_question"], **snapshot})


# -------------------
# PARTICIPANTS
# -------------------
@admin_bp.route("/participants", methods=["GET"])
@admin_required
def participants():
    return jsonify(get_service().list_participants())


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id):
    result = get_service().delete_participant(user_id)
    return jsonify({"status": "ok", **result})


@admin_bp.route("/users/<user_id>/reset-pin", methods=["POST"])
@admin_required
def reset_pin(user_id):
    result = get_service().reset_participant_pin(user_id, json_body().get("new_pin"))
    return jsonify({"status": "ok", **result})


# -------------------
# AUDIT LOG
# -------------------
@admin_bp.route("/logs", methods=["GET"])
@admin_required
def logs():
    return jsonify(get_service().recent_logs(request.args.get("limit", 100)))
