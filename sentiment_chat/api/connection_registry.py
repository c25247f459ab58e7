"""Registry of the live WebSocket connections of a chat room."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from starlette.websockets import WebSocket, WebSocketState

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Protocol state of a single connection."""
    CONNECTED = "connected"
    JOINED = "joined"
    CLOSED = "closed"


@dataclass(eq=False)
class ChatConnection:
    """A live WebSocket plus the identity it declared when joining.

    Compared and hashed by identity, so two connections of the same user
    are tracked independently.
    """
    websocket: WebSocket
    user_id: Optional[str] = None
    username: Optional[str] = None
    state: ConnectionState = ConnectionState.CONNECTED
    connected_at: float = field(default_factory=time.monotonic)

    @property
    def is_open(self) -> bool:
        return self.websocket.client_state == WebSocketState.CONNECTED

    @property
    def has_joined(self) -> bool:
        return self.state == ConnectionState.JOINED

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)

    async def close(self, code: int = 1011) -> None:
        await self.websocket.close(code=code)


class ConnectionRegistry:
    """The set of currently open connections, in registration order."""

    def __init__(self):
        self._connections: Dict[ChatConnection, None] = {}

    def add(self, connection: ChatConnection) -> None:
        self._connections[connection] = None
        logger.debug(f"[REGISTRY] Added connection ({self.size} online)")

    def remove(self, connection: ChatConnection) -> bool:
        """Remove a connection. Returns False if it was not registered."""
        if connection not in self._connections:
            return False
        del self._connections[connection]
        logger.debug(f"[REGISTRY] Removed connection ({self.size} online)")
        return True

    def __contains__(self, connection: ChatConnection) -> bool:
        return connection in self._connections

    @property
    def size(self) -> int:
        return len(self._connections)

    def snapshot(self) -> List[ChatConnection]:
        """Copy of the current members, safe to iterate while others join or leave."""
        return list(self._connections)

    def for_each(self, visitor: Callable[[ChatConnection], None]) -> None:
        for connection in self.snapshot():
            visitor(connection)
