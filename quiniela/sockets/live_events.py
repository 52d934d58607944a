import logging
import threading

from flask import request
from flask_socketio import emit

from quiniela.services import get_service

logger = logging.getLogger(__name__)

# sid -> Subscription for every connected live viewer
live_subscriptions = {}
_subscriptions_lock = threading.Lock()

PUMP_POLL_SECONDS = 1.0


def pump_events(socketio, subscription, sid):
    """Forward one viewer's queued events to its socket until it disconnects."""
    while not subscription.closed:
        event = subscription.get(timeout=PUMP_POLL_SECONDS)
        if event is None:
            continue
        socketio.emit(event.kind, event.payload, to=sid)


def register_live_events(socketio):

    @socketio.on("connect")
    def handle_connect(auth=None):
        broadcaster = get_service().broadcaster
        subscription = broadcaster.subscribe()
        with _subscriptions_lock:
            live_subscriptions[request.sid] = subscription

        emit("connected", {"status": "connected"})
        socketio.start_background_task(pump_events, socketio, subscription, request.sid)

    @socketio.on("disconnect")
    def handle_disconnect(*args):
        with _subscriptions_lock:
            subscription = live_subscriptions.pop(request.sid, None)
        if subscription is not None:
            get_service().broadcaster.unsubscribe(subscription)

    @socketio.on("leaderboard_request")
    def handle_leaderboard_request(data=None):
        # Fresh viewers ask once instead of waiting for the next change
        emit("leaderboard", get_service().get_leaderboard())
