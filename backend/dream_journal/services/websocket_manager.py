from fastapi import WebSocket
from typing import List
import logging
from ..models.conversation import DisplayEntry
from ..models.websocket import WebSocketMessage

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections and broadcasts conversation updates"""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        """Accept and store a new WebSocket connection"""
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info("Client connected (%d active)", len(self.active_connections))

    def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection"""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: WebSocketMessage):
        """Broadcast a message to all connected clients"""
        disconnected = []
        for connection in self.active_connections:
            try:
                await connection.send_text(message.model_dump_json())
            except Exception as e:
                logger.warning("Error broadcasting to client: %s", e)
                disconnected.append(connection)

        # Clean up disconnected clients
        for conn in disconnected:
            self.disconnect(conn)

    async def broadcast_entry_added(self, entry: DisplayEntry):
        """Broadcast a new display entry"""
        await self.broadcast(WebSocketMessage(
            type="entry_added",
            data=entry.model_dump(mode="json")
        ))

    async def broadcast_entry_updated(self, entry: DisplayEntry):
        """Broadcast a changed display entry (e.g. an attached image)"""
        await self.broadcast(WebSocketMessage(
            type="entry_updated",
            data=entry.model_dump(mode="json")
        ))

    async def broadcast_loading(self, is_loading: bool, entry_id: str = None):
        """Broadcast a loading flag change; entry_id is set for image generation"""
        await self.broadcast(WebSocketMessage(
            type="loading",
            data={"is_loading": is_loading, "entry_id": entry_id}
        ))

    async def broadcast_reset(self, conversation_id: str):
        """Broadcast that a new dream conversation started"""
        await self.broadcast(WebSocketMessage(
            type="conversation_reset",
            data={"conversation_id": conversation_id}
        ))


# Global instance
manager = ConnectionManager()
