import itertools
import json
import logging
import queue
import threading
import time

from quiniela.errors import TransportError

logger = logging.getLogger(__name__)

SETTINGS_UPDATE = "settings-update"
LEADERBOARD_UPDATE = "leaderboard-update"
HEARTBEAT = "heartbeat"
CONNECTED = "connected"


class LiveEvent:
    """An event serialized once and shared by every subscriber."""

    def __init__(self, kind, payload):
        self.kind = kind
        self.payload = payload
        self.data = json.dumps(payload, default=str)

    def to_sse(self):
        return f"event: {self.kind}\ndata: {self.data}\n\n"


class Subscription:
    """
    One live viewer. Frames wait in a bounded queue; when the viewer
    falls behind, the oldest frame is dropped to make room.
    """

    def __init__(self, subscription_id, maxsize):
        self.id = subscription_id
        self._queue = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self.closed = False
        self.dropped = 0

    def offer(self, event):
        if self.closed:
            raise TransportError()
        with self._lock:
            try:
                self._queue.put_nowait(event)
            except queue.Full:
                try:
                    self._queue.get_nowait()
                    self.dropped += 1
                except queue.Empty:
                    pass
                self._queue.put_nowait(event)

    def get(self, timeout=None):
        """Next event, or None when nothing arrived within timeout."""
        if self.closed:
            return None
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self):
        self.closed = True


class Broadcaster:
    """Process-wide registry of live viewers."""

    def __init__(self, queue_size=32):
        self.queue_size = queue_size
        self._subscriptions = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._heartbeat_started = False

    def subscribe(self):
        subscription = Subscription(next(self._ids), self.queue_size)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        logger.debug("Live subscriber %s added", subscription.id)
        return subscription

    def unsubscribe(self, subscription):
        subscription.close()
        with self._lock:
            removed = self._subscriptions.pop(subscription.id, None)
        if removed is not None:
            logger.debug("Live subscriber %s removed", subscription.id)

    def subscriber_count(self):
        with self._lock:
            return len(self._subscriptions)

    def publish(self, kind, payload):
        """Queue an event for every current subscriber. Returns how many got it."""
        event = LiveEvent(kind, payload)
        with self._lock:
            targets = list(self._subscriptions.values())

        delivered = 0
        for subscription in targets:
            try:
                before = subscription.dropped
                subscription.offer(event)
                delivered += 1
                if subscription.dropped != before:
                    logger.debug("Dropped stale frame for slow subscriber %s", subscription.id)
            except TransportError:
                self.unsubscribe(subscription)
        return delivered

    def heartbeat(self):
        return self.publish(HEARTBEAT, {"time": int(time.time() * 1000)})

    def start_heartbeat(self, socketio, interval):
        if self._heartbeat_started:
            return
        self._heartbeat_started = True

        def _loop():
            while True:
                socketio.sleep(interval)
                self.heartbeat()

        socketio.start_background_task(_loop)
        logger.info("Heartbeat every %ss", interval)
