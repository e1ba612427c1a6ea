from .conversation import ConversationMode, Message, DisplayEntry, ConversationState
from .dream import (
    EMOTIONS,
    SYMBOLS,
    TagCatalog,
    DraftUpdate,
    SubmitRequest,
    SubmitOutcome,
    VisualizeOutcome,
    ConnectionStatus
)
from .websocket import WebSocketMessage

__all__ = [
    "ConversationMode",
    "Message",
    "DisplayEntry",
    "ConversationState",
    "EMOTIONS",
    "SYMBOLS",
    "TagCatalog",
    "DraftUpdate",
    "SubmitRequest",
    "SubmitOutcome",
    "VisualizeOutcome",
    "ConnectionStatus",
    "WebSocketMessage"
]
