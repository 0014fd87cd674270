"""
WebSocket manager for the live scan feed
"""

import json
import logging
from typing import Dict, List
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from ticketing.core.db import get_db
from ticketing.services.repositories import EventRepo

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections per event room"""

    def __init__(self):
        # event_id -> list of websockets
        self.active_connections: Dict[int, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, event_id: int):
        """Accept WebSocket connection and add to event room"""
        await websocket.accept()
        self.active_connections.setdefault(event_id, []).append(websocket)
        logger.info(f"WebSocket connected to event {event_id}. Total connections: {len(self.active_connections[event_id])}")

    def disconnect(self, websocket: WebSocket, event_id: int):
        """Remove WebSocket connection from event room"""
        connections = self.active_connections.get(event_id)
        if not connections or websocket not in connections:
            return
        connections.remove(websocket)
        logger.info(f"WebSocket disconnected from event {event_id}. Remaining connections: {len(connections)}")
        if not connections:
            del self.active_connections[event_id]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(jsonable_encoder(message)))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_event(self, event_id: int, message: dict):
        """Broadcast message to all WebSockets watching an event"""
        connections = list(self.active_connections.get(event_id, []))
        if not connections:
            return

        payload = json.dumps(jsonable_encoder(message))
        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(payload)
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, event_id)

    def get_connection_count(self, event_id: int) -> int:
        return len(self.active_connections.get(event_id, []))

    def get_all_connection_counts(self) -> Dict[int, int]:
        return {
            event_id: len(connections)
            for event_id, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

router = APIRouter()

@router.websocket("/events/{event_id}")
async def websocket_endpoint(
    websocket: WebSocket,
    event_id: int,
    db: Session = Depends(get_db)
):
    """Live feed of scans and status changes for one event"""
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        await websocket.close(code=4004, reason="Event not found")
        return

    await websocket_manager.connect(websocket, event_id)

    try:
        await websocket_manager.send_personal_message({
            "type": "connection",
            "message": f"Connected to event: {event.name}",
            "event_id": event_id,
            "connection_count": websocket_manager.get_connection_count(event_id)
        }, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                await websocket_manager.send_personal_message({
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, event_id)

@router.get("/stats")
async def websocket_stats():
    """Connection statistics"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "total_events_with_connections": len(counts),
        "connection_counts": counts,
        "total_connections": sum(counts.values())
    }
