from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import pytest

# Allow tests to import the backend package when pytest runs from tests/.
BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
BACKEND_STR = str(BACKEND_DIR)
if BACKEND_STR not in sys.path:
    sys.path.insert(0, BACKEND_STR)

from dream_journal.core.errors import GatewayError  # noqa: E402
from dream_journal.models.conversation import Message  # noqa: E402


class FakeGateway:
    """Records calls and answers with canned replies instead of calling OpenAI."""

    def __init__(
        self,
        reply: str = "Analysis text",
        image_url: str = "https://images.example/dream.png",
    ) -> None:
        self.reply = reply
        self.image_url = image_url
        self.completion_error: Exception | None = None
        self.image_error: Exception | None = None
        self.completion_calls: list[list[Message]] = []
        self.image_calls: list[tuple[str, list[str], list[str]]] = []
        self.before_reply = None

    async def complete_conversation(self, messages: list[Message]) -> str:
        self.completion_calls.append(list(messages))
        if self.before_reply is not None:
            await self.before_reply()
        if self.completion_error is not None:
            raise self.completion_error
        return self.reply

    async def generate_visualization(
        self, dream_text: str, symbols: Sequence[str], emotions: Sequence[str]
    ) -> str:
        self.image_calls.append((dream_text, list(symbols), list(emotions)))
        if self.image_error is not None:
            raise self.image_error
        return self.image_url

    async def test_connection(self) -> str:
        if self.completion_error is not None:
            raise self.completion_error
        return "Connection successful!"


class RecordingNotifier:
    """Collects broadcast events in place of the WebSocket manager."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    async def broadcast_entry_added(self, entry) -> None:
        self.events.append(("entry_added", entry.id))

    async def broadcast_entry_updated(self, entry) -> None:
        self.events.append(("entry_updated", entry.id))

    async def broadcast_loading(self, is_loading: bool, entry_id: str | None = None) -> None:
        self.events.append(("loading", (is_loading, entry_id)))

    async def broadcast_reset(self, conversation_id: str) -> None:
        self.events.append(("conversation_reset", conversation_id))


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def conversation(gateway: FakeGateway, notifier: RecordingNotifier):
    from dream_journal.services.conversation_manager import DreamConversationManager

    return DreamConversationManager(gateway=gateway, notifier=notifier)


@pytest.fixture
def gateway_failure() -> GatewayError:
    return GatewayError("Dream analysis failed: Connection error.")
