import datetime

from flask import Blueprint, jsonify

from quiniela.services import get_service

public_bp = Blueprint("public", __name__)


@public_bp.route("/health")
def health():
    return jsonify({
        "status": "ok",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "live_subscribers": get_service().broadcaster.subscriber_count(),
    })


@public_bp.route("/settings")
def settings():
    return jsonify(get_service().get_settings())


@public_bp.route("/answers")
def public_answers():
    # Empty until the operator makes answers visible
    return jsonify(get_service().get_public_answers())


@public_bp.route("/questions")
def questions():
    return jsonify(get_service().catalog.to_list())
