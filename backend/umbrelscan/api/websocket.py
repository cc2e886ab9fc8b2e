from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Set
import json
import asyncio
import logging

router = APIRouter()

logger = logging.getLogger(__name__)

KEEPALIVE_SECONDS = 30.0


def encode_event(event_type: str, data: dict) -> str:
    return json.dumps({"type": event_type, "data": data}, default=str)


class ConnectionManager:
    """Fans scanner events out to connected WebSocket clients."""

    def __init__(self):
        self.active_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)

    async def broadcast(self, event_type: str, data: dict):
        """Send an event to every client, dropping the ones that fail."""
        message = encode_event(event_type, data)

        disconnected = set()
        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
            except Exception:
                disconnected.add(connection)

        if disconnected:
            logger.debug(f"Dropping {len(disconnected)} stale WebSocket client(s)")
        self.active_connections -= disconnected

    async def send_personal(self, websocket: WebSocket, event_type: str, data: dict):
        await websocket.send_text(encode_event(event_type, data))


# Global connection manager
manager = ConnectionManager()


async def scanner_callback(event_type: str, data: dict):
    """Callback for scanner events to broadcast to WebSocket clients."""
    await manager.broadcast(event_type, data)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Stream scan progress and discovered instances."""
    from ..main import scanner

    await manager.connect(websocket)

    try:
        # Late joiners get the current state straight away
        await manager.send_personal(websocket, "scan_status", scanner.status())

        while True:
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=KEEPALIVE_SECONDS
                )
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    continue

                msg_type = message.get("type") if isinstance(message, dict) else None
                if msg_type == "ping":
                    await manager.send_personal(websocket, "pong", {})
                elif msg_type == "status":
                    await manager.send_personal(websocket, "scan_status", scanner.status())

            except asyncio.TimeoutError:
                try:
                    await manager.send_personal(websocket, "ping", {})
                except Exception:
                    break

    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
