import logging

from flask import Blueprint, Response, jsonify

from quiniela.services import get_service
from quiniela.services.broadcaster import CONNECTED, LiveEvent

logger = logging.getLogger(__name__)

leaderboard_bp = Blueprint("leaderboard", __name__)

# How long the stream waits for an event before checking the subscription again
STREAM_POLL_SECONDS = 1.0


def event_stream(subscription, poll_seconds=STREAM_POLL_SECONDS):
    yield LiveEvent(CONNECTED, {"status": "connected"}).to_sse()
    while not subscription.closed:
        event = subscription.get(timeout=poll_seconds)
        if event is not None:
            yield event.to_sse()


@leaderboard_bp.route("")
def leaderboard():
    return jsonify(get_service().get_leaderboard())


@leaderboard_bp.route("/stream")
def stream():
    broadcaster = get_service().broadcaster
    subscription = broadcaster.subscribe()

    response = Response(event_stream(subscription), mimetype="text/event-stream")
    response.headers["Cache-Control"] = "no-cache"
    response.headers["X-Accel-Buffering"] = "no"
    response.headers["Access-Control-Allow-Origin"] = "*"
    # Runs when the client goes away, even if the stream never started
    response.call_on_close(lambda: broadcaster.unsubscribe(subscription))
    return response


@leaderboard_bp.route("/position/<user_id>")
def position(user_id):
    return jsonify(get_service().get_user_position(user_id))
