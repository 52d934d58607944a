from flask import Blueprint, jsonify

from quiniela.services import get_service
from .user_routes import json_body

predictions_bp = Blueprint("predictions", __name__)


@predictions_bp.route("", methods=["POST"])
def save_predictions():
    data = json_body()
    result = get_service().submit_predictions(data.get("user_id"), data.get("predictions"))
    return jsonify({"status": "ok", "msg": "Predicciones guardadas", **result}), 201


@predictions_bp.route("/user/<user_id>")
def user_predictions(user_id):
    return jsonify(get_service().get_predictions(user_id))


@predictions_bp.route("/user/<user_id>/complete")
def user_progress(user_id):
    return jsonify(get_service().prediction_progress(user_id))
