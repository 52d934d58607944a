import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from quiniela.errors import QuinielaError

from .public_routes import public_bp
from .user_routes import users_bp
from .prediction_routes import predictions_bp
from .leaderboard_routes import leaderboard_bp
from .results_routes import results_bp
from .admin_routes import admin_bp

logger = logging.getLogger(__name__)


def register_routes(app):
    app.register_blueprint(public_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(predictions_bp, url_prefix="/api/predictions")
    app.register_blueprint(leaderboard_bp, url_prefix="/api/leaderboard")
    app.register_blueprint(results_bp, url_prefix="/api/results")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    @app.errorhandler(QuinielaError)
    def handle_quiniela_error(e):
        if e.status_code >= 500:
            logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        msg = "Endpoint no encontrado" if e.code == 404 else e.description
        return jsonify({"status": "error", "msg": msg}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Unhandled error")
        return jsonify({"status": "error", "msg": "Error interno del servidor"}), 500
