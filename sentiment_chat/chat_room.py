"""The shared chat room: store, connections, broadcaster and scheduler."""

import logging
from typing import Optional

from starlette.websockets import WebSocket

from .api.broadcaster import Broadcaster
from .api.chat_session_handler import ChatSessionHandler
from .api.connection_registry import ConnectionRegistry
from .config import ChatServerConfig
from .ingestion import MessageIngestion
from .scheduler import DeferredTaskScheduler
from .storage import MessageStore, create_message_store

logger = logging.getLogger(__name__)


class ChatRoom:
    """Owns the mutable state of one chat room.

    Created once per application and handed to the routes. Nothing in here
    is a module-level singleton, so tests can run isolated rooms side by side.
    """

    def __init__(
        self,
        config: Optional[ChatServerConfig] = None,
        *,
        store: Optional[MessageStore] = None,
    ):
        self.config = config or ChatServerConfig()
        self.store = store or create_message_store(self.config)
        self.registry = ConnectionRegistry()
        self.broadcaster = Broadcaster(self.registry)
        self.scheduler = DeferredTaskScheduler()
        self.ingestion = MessageIngestion(
            store=self.store,
            broadcaster=self.broadcaster,
            scheduler=self.scheduler,
            sentiment_delay=self.config.sentiment_delay,
        )

    def create_session(self, websocket: WebSocket) -> ChatSessionHandler:
        """Create the protocol handler for a newly accepted WebSocket."""
        return ChatSessionHandler(
            websocket=websocket,
            registry=self.registry,
            broadcaster=self.broadcaster,
            store=self.store,
        )

    @property
    def online_count(self) -> int:
        return self.registry.size

    async def shutdown(self) -> None:
        """Cancel pending sentiment tasks and release the store."""
        cancelled = await self.scheduler.cancel_all()
        await self.store.close()
        logger.info(f"[ROOM] Shut down ({cancelled} pending sentiment tasks cancelled)")
