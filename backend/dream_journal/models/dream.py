from pydantic import BaseModel
from typing import List, Optional
from .conversation import DisplayEntry


EMOTIONS = [
    "Happy", "Excited", "Peaceful", "Anxious", "Scared", "Confused",
    "Sad", "Angry", "Curious", "Nostalgic", "Empowered", "Vulnerable"
]

SYMBOLS = [
    "Shadow Figure", "Water/Ocean", "Animals", "Death/Rebirth",
    "Journey/Quest", "Wise Elder", "Divine Mother", "Inner Child",
    "House/Building", "Flying/Falling", "Mirror", "Tree"
]


class TagCatalog(BaseModel):
    """Labels the user can attach to a dream before submitting it"""
    emotions: List[str] = EMOTIONS
    symbols: List[str] = SYMBOLS


class DraftUpdate(BaseModel):
    """Request model for updating the pending input"""
    text: str


class SubmitRequest(BaseModel):
    """Request model for submitting a dream or a follow-up question.

    When emotions/symbols are omitted the current selection is used.
    """
    text: str
    emotions: Optional[List[str]] = None
    symbols: Optional[List[str]] = None


class SubmitOutcome(BaseModel):
    """Result of one submit: the user's turn and the assistant's reply"""
    success: bool
    user_entry: DisplayEntry
    assistant_entry: Optional[DisplayEntry] = None
    error: Optional[str] = None


class VisualizeOutcome(BaseModel):
    """Result of a visualization request for one entry"""
    success: bool
    entry: DisplayEntry
    error: Optional[str] = None


class ConnectionStatus(BaseModel):
    """Response of the API connectivity self-test"""
    ok: bool
    reply: str
