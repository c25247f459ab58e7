"""End-to-end tests for the HTTP API and the chat WebSocket."""
import json

import pytest
from fastapi.testclient import TestClient

from sentiment_chat.chat_room import ChatRoom
from sentiment_chat.config import ChatServerConfig
from sentiment_chat.errors import MessageStoreError
from sentiment_chat.standalone import create_app
from sentiment_chat.storage import MemoryMessageStore


class FailingStore(MemoryMessageStore):
    """Store whose substrate is down."""

    async def list_messages(self):
        raise MessageStoreError("database unavailable")

    async def create_message(self, *, user_id, username, text):
        raise MessageStoreError("database unavailable")


def receive_until(ws, event_type: str, limit: int = 20) -> list[dict]:
    """Receive events up to and including the first one of ``event_type``."""
    events = []
    for _ in range(limit):
        event = ws.receive_json()
        events.append(event)
        if event["type"] == event_type:
            return events
    raise AssertionError(f"No {event_type} event within {limit} events: {events}")


def join(ws, user_id: str, username: str) -> list[dict]:
    ws.send_json({"type": "join", "userId": user_id, "username": username})
    return receive_until(ws, "user_joined")


@pytest.fixture
def client(room):
    with TestClient(create_app(room=room)) as test_client:
        yield test_client


# ── HTTP ─────────────────────────────────────────────────────────


def test_post_message_returns_pending_message(client):
    response = client.post("/api/message", json={"userId": "1", "username": "Alice", "text": "hi"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    message = body["message"]
    assert message["id"] == 1
    assert message["userId"] == "1"
    assert message["username"] == "Alice"
    assert message["text"] == "hi"
    assert message["sentiment"] == "pending"
    assert "createdAt" in message


@pytest.mark.parametrize("payload", [
    {"userId": "1", "username": "Alice", "text": ""},
    {"userId": "1", "username": "Alice"},
    {"username": "Alice", "text": "hi"},
    {"userId": "1", "username": "Alice", "text": 42},
    ["not", "an", "object"],
])
def test_post_invalid_message_is_rejected(client, room, payload):
    response = client.post("/api/message", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid message data"}
    assert room.store.message_count == 0


def test_post_non_json_body_is_rejected(client):
    response = client.post("/api/message", content=b"text=hi", headers={"Content-Type": "text/plain"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid message data"}


def test_get_messages_in_creation_order(client):
    for text in ["one", "two", "three"]:
        assert client.post("/api/message", json={"userId": "1", "username": "Alice", "text": text}).status_code == 200

    response = client.get("/api/messages")

    assert response.status_code == 200
    messages = response.json()
    assert [m["text"] for m in messages] == ["one", "two", "three"]
    assert [m["id"] for m in messages] == [1, 2, 3]


def test_store_failures_map_to_500(config):
    room = ChatRoom(config, store=FailingStore())
    with TestClient(create_app(room=room)) as client:
        response = client.get("/api/messages")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch messages"}

        response = client.post("/api/message", json={"userId": "1", "username": "Alice", "text": "hi"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create message"}


# ── WebSocket ────────────────────────────────────────────────────


@pytest.mark.timeout(10)
def test_join_receives_snapshot_and_announcement(client):
    client.post("/api/message", json={"userId": "0", "username": "Zed", "text": "before"})

    with client.websocket_connect("/ws") as ws:
        events = join(ws, "1", "Alice")

    assert [e["type"] for e in events] == ["initial_messages", "user_joined"]
    assert [m["text"] for m in events[0]["messages"]] == ["before"]
    assert events[1] == {"type": "user_joined", "username": "Alice", "onlineCount": 1}


@pytest.mark.timeout(10)
def test_malformed_frame_keeps_connection_open(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("{broken")
        ws.send_bytes(b"\x00\x01garbage\xff")
        ws.send_json({"type": "join", "username": "missing id"})
        events = join(ws, "1", "Alice")

    assert events[0]["type"] == "initial_messages"


@pytest.mark.timeout(10)
def test_binary_join_frame_is_accepted(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_bytes(json.dumps({"type": "join", "userId": "1", "username": "Alice"}).encode())
        events = receive_until(ws, "user_joined")

    assert [e["type"] for e in events] == ["initial_messages", "user_joined"]
    assert events[-1] == {"type": "user_joined", "username": "Alice", "onlineCount": 1}


@pytest.mark.timeout(10)
def test_double_join_does_not_repeat_snapshot(client):
    with client.websocket_connect("/ws") as ws:
        join(ws, "1", "Alice")
        ws.send_json({"type": "join", "userId": "1", "username": "Alice"})
        client.post("/api/message", json={"userId": "1", "username": "Alice", "text": "ok fine"})

        # The next event is the new message, not a second snapshot
        assert ws.receive_json()["type"] == "new_message"
        assert ws.receive_json()["type"] == "sentiment_update"


@pytest.mark.timeout(10)
def test_leave_is_announced_to_remaining(client):
    with client.websocket_connect("/ws") as alice:
        join(alice, "1", "Alice")
        with client.websocket_connect("/ws") as bob:
            join(bob, "2", "Bob")
            assert receive_until(alice, "user_joined")[-1]["onlineCount"] == 2

        left = receive_until(alice, "user_left")[-1]

    assert left == {"type": "user_left", "username": "Bob", "onlineCount": 1}


@pytest.mark.timeout(10)
def test_unjoined_connection_counts_toward_online(client):
    with client.websocket_connect("/ws"):
        with client.websocket_connect("/ws") as alice:
            events = join(alice, "1", "Alice")

    assert events[-1]["onlineCount"] == 2


@pytest.mark.timeout(10)
def test_message_lifecycle_scenario(store):
    """Alice posts, Bob joins mid-flow, both see the sentiment arrive."""
    room = ChatRoom(ChatServerConfig(sentiment_delay=1.0), store=store)
    with TestClient(create_app(room=room)) as client:
        with client.websocket_connect("/ws") as alice:
            alice_joined = join(alice, "1", "Alice")[-1]
            assert alice_joined == {"type": "user_joined", "username": "Alice", "onlineCount": 1}

            response = client.post("/api/message", json={"userId": "1", "username": "Alice", "text": "I love this"})
            message_id = response.json()["message"]["id"]

            new_message = alice.receive_json()
            assert new_message["type"] == "new_message"
            assert new_message["message"]["sentiment"] == "pending"

            with client.websocket_connect("/ws") as bob:
                bob_events = join(bob, "2", "Bob")
                snapshot = bob_events[0]
                assert snapshot["type"] == "initial_messages"
                assert [m["id"] for m in snapshot["messages"]] == [message_id]
                assert snapshot["messages"][0]["sentiment"] in ("pending", "positive")
                assert bob_events[-1] == {"type": "user_joined", "username": "Bob", "onlineCount": 2}

                alice_update = receive_until(alice, "sentiment_update")[-1]
                bob_update = receive_until(bob, "sentiment_update")[-1]

    expected = {"type": "sentiment_update", "messageId": message_id, "sentiment": "positive"}
    assert alice_update == expected
    assert bob_update == expected
