import asyncio
import json

from fastapi.websockets import WebSocketState

from itinerary_api.broadcast import DebugBroadcaster
from itinerary_api.schemas import DebugLog


class FakeObserver:
    def __init__(self, state=WebSocketState.CONNECTED, fail=False):
        self.client_state = state
        self.application_state = WebSocketState.CONNECTED
        self.fail = fail
        self.sent = []
        self.closed = False

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("socket write failed")
        self.sent.append(json.loads(text))

    async def close(self):
        self.closed = True


def test_broadcast_without_observers_is_noop():
    broadcaster = DebugBroadcaster()
    asyncio.run(broadcaster.broadcast(DebugLog(message="nobody listening")))
    assert broadcaster.observer_count == 0


def test_delivers_record_fields():
    broadcaster = DebugBroadcaster()
    viewer = FakeObserver()
    broadcaster.subscribe(viewer)
    asyncio.run(broadcaster.log("Filtering 3 activities...", "info"))
    assert len(viewer.sent) == 1
    record = viewer.sent[0]
    assert record["level"] == "info"
    assert record["message"] == "Filtering 3 activities..."
    assert len(record["timestamp"]) == len("12:34:56")


def test_duplicate_subscribe_delivers_once():
    broadcaster = DebugBroadcaster()
    viewer = FakeObserver()
    broadcaster.subscribe(viewer)
    broadcaster.subscribe(viewer)
    asyncio.run(broadcaster.log("once"))
    assert broadcaster.observer_count == 1
    assert len(viewer.sent) == 1


def test_unsubscribed_observer_gets_nothing_more():
    broadcaster = DebugBroadcaster()
    viewer = FakeObserver()
    broadcaster.subscribe(viewer)
    asyncio.run(broadcaster.log("first"))
    broadcaster.unsubscribe(viewer)
    asyncio.run(broadcaster.log("second"))
    assert [r["message"] for r in viewer.sent] == ["first"]
    # Unknown observers are ignored.
    broadcaster.unsubscribe(FakeObserver())


def test_not_ready_observers_are_skipped_but_kept():
    broadcaster = DebugBroadcaster()
    ready = FakeObserver()
    connecting = FakeObserver(state=WebSocketState.CONNECTING)
    broadcaster.subscribe(ready)
    broadcaster.subscribe(connecting)
    asyncio.run(broadcaster.log("hello", "success"))
    assert len(ready.sent) == 1
    assert connecting.sent == []
    assert broadcaster.observer_count == 2


def test_failing_observer_does_not_affect_others():
    broadcaster = DebugBroadcaster()
    broken = FakeObserver(fail=True)
    healthy = FakeObserver()
    broadcaster.subscribe(broken)
    broadcaster.subscribe(healthy)
    asyncio.run(broadcaster.log("still delivered", "error"))
    assert [r["level"] for r in healthy.sent] == ["error"]
    assert broadcaster.observer_count == 2


def test_close_releases_observers():
    broadcaster = DebugBroadcaster()
    viewer = FakeObserver()
    broadcaster.subscribe(viewer)
    asyncio.run(broadcaster.close())
    assert viewer.closed is True
    assert broadcaster.observer_count == 0
