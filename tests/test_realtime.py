import json

import pytest
from fastapi.testclient import TestClient

from rentdesk.core.realtime import RelayManager, frame
from rentdesk.main import app


class FakeWebSocket:
    def __init__(self, broken=False):
        self.accepted = False
        self.broken = broken
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_text(self, message):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(message))


def test_frame():
    assert json.loads(frame("room_joined", "abc")) == {"event": "room_joined", "data": "abc"}


@pytest.mark.asyncio
async def test_rooms_and_broadcast():
    manager = RelayManager()
    alice, bob, carol = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
    for ws in (alice, bob, carol):
        await manager.connect(ws)
    assert alice.accepted
    assert manager.get_total_connections() == 3

    await manager.join(alice, "property-1")
    await manager.join(bob, "property-1")
    await manager.emit_to_room("property-1", "receive_message", {"text": "hi"})

    assert alice.sent == [{"event": "receive_message", "data": {"text": "hi"}}]
    assert bob.sent == alice.sent
    assert carol.sent == []

    await manager.broadcast("maintenance_status_update", {"status": "completed"})
    assert carol.sent == [{"event": "maintenance_status_update", "data": {"status": "completed"}}]


@pytest.mark.asyncio
async def test_disconnect_leaves_rooms():
    manager = RelayManager()
    ws = FakeWebSocket()
    await manager.connect(ws)
    await manager.join(ws, "room")
    await manager.disconnect(ws)

    assert manager.get_total_connections() == 0
    assert manager.room_size("room") == 0


@pytest.mark.asyncio
async def test_broken_socket_is_dropped():
    manager = RelayManager()
    good, broken = FakeWebSocket(), FakeWebSocket(broken=True)
    await manager.connect(good)
    await manager.connect(broken)

    await manager.broadcast("ping", None)
    assert good.sent == [{"event": "ping", "data": None}]
    assert manager.get_total_connections() == 1


def test_websocket_relay():
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
            first.send_json({"event": "join_room", "data": "property-1"})
            assert first.receive_json() == {"event": "room_joined", "data": "property-1"}
            second.send_json({"event": "join_room", "data": "property-1"})
            assert second.receive_json() == {"event": "room_joined", "data": "property-1"}

            message = {"roomId": "property-1", "text": "Water off at 3pm"}
            first.send_json({"event": "send_message", "data": message})
            assert first.receive_json() == {"event": "receive_message", "data": message}
            assert second.receive_json() == {"event": "receive_message", "data": message}

            update = {"ticket_id": "MAINT-1", "status": "in-progress"}
            second.send_json({"event": "maintenance_update", "data": update})
            assert first.receive_json() == {"event": "maintenance_status_update", "data": update}
            assert second.receive_json() == {"event": "maintenance_status_update", "data": update}


def test_websocket_errors():
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            assert ws.receive_json()["event"] == "error"

            ws.send_json({"event": "send_message", "data": {"text": "no room"}})
            assert ws.receive_json()["event"] == "error"

            ws.send_json({"event": "dance"})
            assert ws.receive_json() == {"event": "error", "data": {"message": "Unknown event: dance"}}
