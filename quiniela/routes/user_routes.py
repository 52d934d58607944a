from flask import Blueprint, jsonify, request

from quiniela.errors import ValidationError
from quiniela.services import get_service

users_bp = Blueprint("users", __name__)


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Se esperaba un objeto JSON")
    return data


@users_bp.route("/check", methods=["POST"])
def check():
    data = json_body()
    return jsonify(get_service().check_nickname(data.get("nickname")))


@users_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    participant = get_service().register_participant(data.get("nickname"), data.get("pin"))
    return jsonify(participant), 201


@users_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    return jsonify(get_service().login(data.get("nickname"), data.get("pin")))


@users_bp.route("", methods=["GET"])
def count():
    return jsonify({"count": get_service().participant_count()})
