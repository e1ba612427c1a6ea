from __future__ import annotations

import asyncio
import json

from dream_journal.models.conversation import DisplayEntry
from dream_journal.services.websocket_manager import ConnectionManager


class FakeSocket:
    def __init__(self, broken: bool = False) -> None:
        self.sent: list[str] = []
        self.broken = broken
        self.accepted = False

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(text)


def test_broadcast_entry_and_drop_broken_clients() -> None:
    manager = ConnectionManager()
    good, broken = FakeSocket(), FakeSocket(broken=True)
    entry = DisplayEntry(text="Analysis text", author="assistant", is_initial_analysis=True)

    async def scenario() -> None:
        await manager.connect(good)
        await manager.connect(broken)
        await manager.broadcast_entry_added(entry)

    asyncio.run(scenario())

    assert good.accepted
    payload = json.loads(good.sent[0])
    assert payload["type"] == "entry_added"
    assert payload["data"]["id"] == entry.id
    assert payload["data"]["is_initial_analysis"] is True
    assert manager.active_connections == [good]


def test_loading_and_reset_messages() -> None:
    manager = ConnectionManager()
    socket = FakeSocket()

    async def scenario() -> None:
        await manager.connect(socket)
        await manager.broadcast_loading(True, "entry-1")
        await manager.broadcast_reset("conv-2")

    asyncio.run(scenario())

    loading, reset = (json.loads(text) for text in socket.sent)
    assert loading["type"] == "loading"
    assert loading["data"] == {"is_loading": True, "entry_id": "entry-1"}
    assert reset["type"] == "conversation_reset"
    assert reset["data"] == {"conversation_id": "conv-2"}
