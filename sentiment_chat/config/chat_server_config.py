import os
from dataclasses import dataclass
from typing import ClassVar, Optional


@dataclass
class ChatServerConfig:
    """Defines the runtime configuration of a chat server."""
    MEMORY: ClassVar[str] = "memory"
    MONGODB: ClassVar[str] = "mongodb"
    STORE_BACKENDS: ClassVar[set[str]] = {MEMORY, MONGODB}

    sentiment_delay: float = 3.0
    """Seconds between a message's creation and its sentiment analysis."""
    ws_path: str = "/ws"
    """Path of the real-time WebSocket endpoint."""
    api_prefix: str = "/api"
    """Prefix of the HTTP message endpoints."""
    store_backend: str = MEMORY
    """Message store backend, "memory" or "mongodb"."""
    mongo_uri: Optional[str] = None
    """MongoDB connection string, required for the "mongodb" backend."""
    mongo_db: str = "sentiment_chat"
    """MongoDB database name."""
    mongo_collection: str = "messages"
    """MongoDB collection holding the messages."""

    def __post_init__(self):
        if self.sentiment_delay < 0:
            raise ValueError(f"sentiment_delay must not be negative, got {self.sentiment_delay}")
        if self.store_backend not in self.STORE_BACKENDS:
            raise ValueError(f"Unsupported message store backend: {self.store_backend}")

    @classmethod
    def from_env(cls) -> "ChatServerConfig":
        """Build a config from environment variables.

        SENTIMENT_DELAY_MS is given in milliseconds; everything else maps 1:1.

        :raises ValueError: If a value cannot be parsed
        """
        delay_ms = os.environ.get("SENTIMENT_DELAY_MS", "3000")
        try:
            delay = int(delay_ms) / 1000.0
        except ValueError:
            raise ValueError(f"SENTIMENT_DELAY_MS must be an integer, got {delay_ms!r}")
        return cls(
            sentiment_delay=delay,
            ws_path=os.environ.get("WS_PATH", "/ws"),
            store_backend=os.environ.get("MESSAGE_STORE", cls.MEMORY).lower(),
            mongo_uri=os.environ.get("MONGODB_CONNECTION"),
            mongo_db=os.environ.get("MONGODB_DB", "sentiment_chat"),
            mongo_collection=os.environ.get("MONGODB_COLLECTION", "messages"),
        )
