from pydantic import BaseModel, Field
from typing import Literal, Any
from datetime import datetime


class WebSocketMessage(BaseModel):
    """WebSocket message format"""
    type: Literal[
        "entry_added",
        "entry_updated",
        "loading",
        "conversation_reset"
    ]
    data: Any
    timestamp: datetime = Field(default_factory=datetime.now)
