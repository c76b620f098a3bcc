"""
In-process realtime relay.

Tracks open WebSocket connections and named rooms so route handlers can
fan JSON events out to a room or to everyone. State lives in this process
only; nothing is persisted.
"""
from typing import Any, Dict, Set
import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def frame(event: str, data: Any) -> str:
    """Wire format for every server-to-client message"""
    return json.dumps({"event": event, "data": data})


class RelayManager:
    """Manages WebSocket connections and room membership."""

    def __init__(self):
        self._connections: Set[WebSocket] = set()
        # room id -> sockets joined to it
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)
        logger.info(f"[REALTIME] Client connected ({len(self._connections)} open)")

    async def disconnect(self, websocket: WebSocket):
        """Remove a connection from the registry and from every room."""
        async with self._lock:
            self._connections.discard(websocket)
            for room_id in list(self._rooms):
                self._rooms[room_id].discard(websocket)
                if not self._rooms[room_id]:
                    del self._rooms[room_id]
        logger.info(f"[REALTIME] Client disconnected ({len(self._connections)} open)")

    async def join(self, websocket: WebSocket, room_id: str):
        async with self._lock:
            self._rooms.setdefault(room_id, set()).add(websocket)

    async def emit_to_room(self, room_id: str, event: str, data: Any):
        """Send an event to every socket joined to `room_id`."""
        async with self._lock:
            targets = self._rooms.get(room_id, set()).copy()
        await self._send_all(targets, frame(event, data))

    async def broadcast(self, event: str, data: Any):
        """Send an event to every connected socket."""
        async with self._lock:
            targets = self._connections.copy()
        await self._send_all(targets, frame(event, data))

    async def _send_all(self, targets: Set[WebSocket], message: str):
        closed = []
        for ws in targets:
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug(f"[REALTIME] Send failed, dropping socket: {e}")
                closed.append(ws)

        for ws in closed:
            await self.disconnect(ws)

    def room_size(self, room_id: str) -> int:
        return len(self._rooms.get(room_id, set()))

    def get_total_connections(self) -> int:
        return len(self._connections)


# Singleton instance
relay = RelayManager()
