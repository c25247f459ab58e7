"""sentiment-chat — real-time chat room with deferred sentiment analysis."""

from sentiment_chat.chat_models import ChatMessage, NewMessage, JoinRequest, Sentiment, EventType
from sentiment_chat.sentiment import classify_sentiment
from sentiment_chat.config import ChatServerConfig
from sentiment_chat.errors import ChatError, MessageValidationError, MessageStoreError
from sentiment_chat.storage import MessageStore, MemoryMessageStore, create_message_store
from sentiment_chat.chat_room import ChatRoom

__all__ = [
    "ChatMessage",
    "NewMessage",
    "JoinRequest",
    "Sentiment",
    "EventType",
    "classify_sentiment",
    "ChatServerConfig",
    "ChatError",
    "MessageValidationError",
    "MessageStoreError",
    "MessageStore",
    "MemoryMessageStore",
    "create_message_store",
    "ChatRoom",
    "create_app",
]


def __getattr__(name: str):
    if name == "create_app":
        from sentiment_chat.standalone import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
