"""Models for chat messages and the real-time wire protocol."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Sentiment(str, Enum):
    """Sentiment label attached to a message."""
    PENDING = "pending"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ChatMessage(BaseModel):
    """A single message in the shared chat room.

    Serialized with camelCase keys (``userId``, ``createdAt``) so the wire
    format matches what the frontend expects.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: str
    username: str
    text: str
    sentiment: Sentiment = Sentiment.PENDING
    created_at: datetime

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class NewMessage(BaseModel):
    """Submission payload for ``POST /api/message``."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    username: str
    text: str = Field(min_length=1)


class JoinRequest(BaseModel):
    """Client ``join`` event payload."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    username: str


# ── Server → client events ──────────────────────────────────────────


class EventType(str, Enum):
    """Types of events exchanged over the WebSocket."""
    JOIN = "join"
    INITIAL_MESSAGES = "initial_messages"
    NEW_MESSAGE = "new_message"
    SENTIMENT_UPDATE = "sentiment_update"
    USER_JOINED = "user_joined"
    USER_LEFT = "user_left"


def initial_messages_event(messages: List[ChatMessage]) -> dict:
    return {
        "type": EventType.INITIAL_MESSAGES.value,
        "messages": [m.to_wire() for m in messages],
    }


def new_message_event(message: ChatMessage) -> dict:
    return {
        "type": EventType.NEW_MESSAGE.value,
        "message": message.to_wire(),
    }


def sentiment_update_event(message_id: int, sentiment: Sentiment) -> dict:
    return {
        "type": EventType.SENTIMENT_UPDATE.value,
        "messageId": message_id,
        "sentiment": sentiment.value,
    }


def presence_event(event_type: EventType, username: str, online_count: int) -> dict:
    """Build a ``user_joined`` or ``user_left`` event."""
    return {
        "type": event_type.value,
        "username": username,
        "onlineCount": online_count,
    }
