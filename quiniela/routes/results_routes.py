from flask import Blueprint, jsonify

from quiniela.services import get_service

results_bp = Blueprint("results", __name__)


@results_bp.route("")
def distributions():
    return jsonify(get_service().get_distributions())
