"""
WebSocket relay.

Clients exchange JSON frames of the form {"event": name, "data": payload}:
- join_room: data is the room id; acknowledged with room_joined
- send_message: data carries roomId (or room_id); relayed as receive_message
  to everyone in that room
- maintenance_update: relayed as maintenance_status_update to every client

The event names follow a Socket.IO style room relay, but this is a plain
WebSocket endpoint speaking JSON text frames; Socket.IO clients cannot connect.
Rooms live in process memory, so run a single worker.
"""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import json
import logging

from rentdesk.core.realtime import frame, relay

router = APIRouter(tags=["Realtime"])
logger = logging.getLogger(__name__)


async def _send_error(websocket: WebSocket, message: str):
    await websocket.send_text(frame("error", {"message": message}))


async def handle_frame(websocket: WebSocket, raw: str):
    """Dispatch one client frame"""
    try:
        message = json.loads(raw)
    except ValueError:
        await _send_error(websocket, "Malformed frame")
        return

    if not isinstance(message, dict) or "event" not in message:
        await _send_error(websocket, "Frame must be an object with an 'event' key")
        return

    event = message["event"]
    data = message.get("data")

    if event == "join_room":
        if not isinstance(data, (str, int)) or data == "":
            await _send_error(websocket, "join_room requires a room id")
            return
        room_id = str(data)
        await relay.join(websocket, room_id)
        await websocket.send_text(frame("room_joined", room_id))

    elif event == "send_message":
        room_id = (data.get("roomId") or data.get("room_id")) if isinstance(data, dict) else None
        if not room_id:
            await _send_error(websocket, "send_message requires roomId")
            return
        await relay.emit_to_room(str(room_id), "receive_message", data)

    elif event == "maintenance_update":
        await relay.broadcast("maintenance_status_update", data)

    else:
        await _send_error(websocket, f"Unknown event: {event}")


@router.websocket("/ws")
async def websocket_relay(websocket: WebSocket):
    await relay.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            await handle_frame(websocket, raw)
    except WebSocketDisconnect:
        pass
    finally:
        await relay.disconnect(websocket)
