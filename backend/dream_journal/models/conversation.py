from pydantic import BaseModel, Field
from typing import List, Optional, Literal, Set
from datetime import datetime
from enum import Enum
import uuid


class ConversationMode(str, Enum):
    """Whether the session still collects tags or is in follow-up chat"""
    COLLECTING_TAGS = "collecting-tags"
    IN_CONVERSATION = "in-conversation"


class Message(BaseModel):
    """Single message in the history sent to the completion service"""
    role: Literal["user", "assistant", "system"]
    content: str


class DisplayEntry(BaseModel):
    """Single turn as rendered by the presentation layer"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    author: Literal["user", "assistant"]
    timestamp: datetime = Field(default_factory=datetime.now)
    emotions: List[str] = []
    symbols: List[str] = []
    # Only set on the assistant reply to the first dream submission
    is_initial_analysis: bool = False
    dream_text: Optional[str] = None
    image_url: Optional[str] = None
    image_error: Optional[str] = None


class ConversationState(BaseModel):
    """Full state of the one dream conversation held by the service"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    history: List[Message] = []
    # System prompt and templated dream of the first submission
    opening_messages: List[Message] = []
    entries: List[DisplayEntry] = []
    mode: ConversationMode = ConversationMode.COLLECTING_TAGS
    draft_text: str = ""
    selected_emotions: List[str] = []
    selected_symbols: List[str] = []
    is_loading: bool = False
    generating_images: Set[str] = set()
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def find_entry(self, entry_id: str) -> Optional[DisplayEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None
