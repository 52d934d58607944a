import logging
import socket

from flask import Flask

from config import Config
from extensions import db, socketio
from quiniela.catalog import DEFAULT_CATALOG
from quiniela.logging_setup import configure_logging
from quiniela.routes import register_routes
from quiniela.services.broadcaster import Broadcaster
from quiniela.services.gate import LockPolicy
from quiniela.services.quiniela_service import QuinielaService
from quiniela.services.store import QuinielaStore
from quiniela.sockets import register_sockets

logger = logging.getLogger("quiniela.app")


def create_app(config_class=Config, catalog=DEFAULT_CATALOG):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    db.init_app(app)
    socketio.init_app(app, cors_allowed_origins="*", async_mode="threading")

    winner_id = app.config["WINNER_QUESTION_ID"]
    winners = [q.id for q in catalog if q.is_winner]
    if winners != [winner_id]:
        raise ValueError(
            f"WINNER_QUESTION_ID {winner_id} must match the single catalog winner question, found {winners}"
        )

    store = QuinielaStore(db, catalog.ids, audit_limit=app.config["AUDIT_LOG_LIMIT"])
    broadcaster = Broadcaster(queue_size=app.config["SUBSCRIBER_QUEUE_SIZE"])
    app.extensions["quiniela"] = QuinielaService(
        store=store,
        gate=LockPolicy(store),
        broadcaster=broadcaster,
        catalog=catalog,
        winner_question_id=winner_id,
    )

    with app.app_context():
        db.create_all()
        store.ensure_settings()

    register_routes(app)
    register_sockets(socketio)

    if app.config.get("HEARTBEAT_ENABLED"):
        broadcaster.start_heartbeat(socketio, app.config["HEARTBEAT_INTERVAL"])

    return app


if __name__ == "__main__":
    app = create_app()
    ip = socket.gethostbyname(socket.gethostname())
    logger.info("QUINIELA READY ON %s:%s", ip, app.config["PORT"])
    socketio.run(app, host=app.config["HOST"], port=app.config["PORT"], allow_unsafe_werkzeug=True)
