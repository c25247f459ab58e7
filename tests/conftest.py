"""Test configuration and fixtures."""
import json

import pytest
from starlette.websockets import WebSocketState

from sentiment_chat.chat_room import ChatRoom
from sentiment_chat.config import ChatServerConfig
from sentiment_chat.storage import MemoryMessageStore

# Short delay so deferred sentiment tasks finish quickly in tests
TEST_SENTIMENT_DELAY = 0.01


class FakeWebSocket:
    """Minimal stand-in for a starlette WebSocket.

    Records every text frame sent to it. With ``fail_send`` set, sending
    raises like a broken transport would.
    """

    def __init__(self, *, fail_send: bool = False):
        self.client_state = WebSocketState.CONNECTED
        self.fail_send = fail_send
        self.sent: list[str] = []
        self.close_code = None

    async def send_text(self, data: str) -> None:
        if self.fail_send:
            raise RuntimeError("transport broken")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        self.close_code = code
        self.client_state = WebSocketState.DISCONNECTED

    @property
    def events(self) -> list[dict]:
        return [json.loads(s) for s in self.sent]

    def event_types(self) -> list[str]:
        return [e["type"] for e in self.events]


@pytest.fixture
def store():
    return MemoryMessageStore()


@pytest.fixture
def config():
    return ChatServerConfig(sentiment_delay=TEST_SENTIMENT_DELAY)


@pytest.fixture
def room(config, store):
    return ChatRoom(config, store=store)
