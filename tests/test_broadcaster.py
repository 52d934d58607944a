"""Unit tests for the live-update broadcaster."""

import json
import threading

from quiniela.services.broadcaster import (
    HEARTBEAT,
    LEADERBOARD_UPDATE,
    Broadcaster,
    LiveEvent,
)


def drain(subscription):
    events = []
    while True:
        event = subscription.get(timeout=0)
        if event is None:
            return events
        events.append(event)


def test_publish_reaches_every_subscriber_once():
    broadcaster = Broadcaster(queue_size=4)
    subs = [broadcaster.subscribe() for _ in range(3)]

    delivered = broadcaster.publish(LEADERBOARD_UPDATE, {"updated_question": 5})

    assert delivered == 3
    for sub in subs:
        events = drain(sub)
        assert [e.kind for e in events] == [LEADERBOARD_UPDATE]
        assert events[0].payload == {"updated_question": 5}


def test_new_subscriber_gets_no_backlog():
    broadcaster = Broadcaster()
    broadcaster.publish(LEADERBOARD_UPDATE, {"n": 1})
    sub = broadcaster.subscribe()
    assert drain(sub) == []
    broadcaster.publish(LEADERBOARD_UPDATE, {"n": 2})
    assert [e.payload["n"] for e in drain(sub)] == [2]


def test_slow_subscriber_drops_oldest_frames():
    broadcaster = Broadcaster(queue_size=2)
    slow = broadcaster.subscribe()
    fast = broadcaster.subscribe()

    for n in range(5):
        broadcaster.publish(LEADERBOARD_UPDATE, {"n": n})
        drain(fast)

    assert [e.payload["n"] for e in drain(slow)] == [3, 4]
    assert slow.dropped == 3


def test_unsubscribed_connection_is_skipped():
    broadcaster = Broadcaster()
    gone = broadcaster.subscribe()
    alive = broadcaster.subscribe()

    broadcaster.unsubscribe(gone)
    broadcaster.unsubscribe(gone)

    assert broadcaster.publish(LEADERBOARD_UPDATE, {}) == 1
    assert broadcaster.subscriber_count() == 1
    assert gone.get(timeout=0) is None
    assert len(drain(alive)) == 1


def test_closed_subscription_is_removed_on_publish():
    broadcaster = Broadcaster()
    dead = broadcaster.subscribe()
    broadcaster.subscribe()
    dead.close()

    assert broadcaster.publish(LEADERBOARD_UPDATE, {}) == 1
    assert broadcaster.subscriber_count() == 1


def test_heartbeat_carries_timestamp():
    broadcaster = Broadcaster()
    sub = broadcaster.subscribe()
    broadcaster.heartbeat()
    event = drain(sub)[0]
    assert event.kind == HEARTBEAT
    assert isinstance(event.payload["time"], int)


def test_sse_frame_format():
    event = LiveEvent("settings-update", {"predictions_locked": True})
    frame = event.to_sse()
    assert frame.startswith("event: settings-update\ndata: ")
    assert frame.endswith("\n\n")
    assert json.loads(frame.split("data: ", 1)[1]) == {"predictions_locked": True}


def test_concurrent_subscribe_and_publish():
    broadcaster = Broadcaster(queue_size=1000)
    errors = []

    def churn():
        try:
            for _ in range(200):
                sub = broadcaster.subscribe()
                broadcaster.unsubscribe(sub)
        except Exception as e:
            errors.append(e)

    stable = broadcaster.subscribe()
    workers = [threading.Thread(target=churn) for _ in range(4)]
    for w in workers:
        w.start()
    for _ in range(200):
        broadcaster.publish(LEADERBOARD_UPDATE, {})
    for w in workers:
        w.join()

    assert errors == []
    assert broadcaster.subscriber_count() == 1
    assert len(drain(stable)) == 200
