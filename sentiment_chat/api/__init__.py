"""Real-time side of the chat: connections, broadcasting and the join protocol.

The HTTP and WS endpoints themselves live in sentiment_chat.server.get_router().
"""

from .connection_registry import ChatConnection, ConnectionRegistry, ConnectionState
from .broadcaster import Broadcaster
from .chat_session_handler import ChatSessionHandler

__all__ = ["ChatConnection", "ConnectionRegistry", "ConnectionState", "Broadcaster", "ChatSessionHandler"]
