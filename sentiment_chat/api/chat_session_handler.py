"""Per-connection protocol handling for the chat WebSocket.

A connection moves through CONNECTED → JOINED → CLOSED. Joining records the
client-declared identity, sends the history snapshot to the joiner and
announces the new member to everyone. Closing removes the connection and,
if it had joined, announces the departure to the remaining members.
"""

import json
import logging

from pydantic import ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from ..chat_models import (
    EventType,
    JoinRequest,
    initial_messages_event,
    presence_event,
)
from ..errors import MessageStoreError
from ..storage import MessageStore
from .broadcaster import Broadcaster
from .connection_registry import ChatConnection, ConnectionRegistry, ConnectionState

logger = logging.getLogger(__name__)


class ChatSessionHandler:
    """Drives the protocol state machine of one WebSocket connection."""

    def __init__(
        self,
        *,
        websocket: WebSocket,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
        store: MessageStore,
    ):
        self.connection = ChatConnection(websocket=websocket)
        self.registry = registry
        self.broadcaster = broadcaster
        self.store = store

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    def open(self) -> None:
        """Register the accepted connection."""
        self.registry.add(self.connection)
        logger.info(f"[WS] Client connected ({self.registry.size} online)")

    async def run(self) -> None:
        """Receive loop. Returns once the transport is gone."""
        ws = self.connection.websocket
        try:
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
                if message.get("text") is not None:
                    await self.handle_raw(message["text"])
                elif message.get("bytes") is not None:
                    await self.handle_raw(message["bytes"].decode("utf-8", errors="replace"))
        except WebSocketDisconnect:
            logger.info(f"[WS] Client disconnected ({self.connection.username or 'not joined'})")
        except Exception as e:
            logger.error(f"[WS] Connection error: {type(e).__name__}: {e}")
        finally:
            await self.close()

    async def handle_raw(self, raw: str) -> None:
        """Parse and dispatch one inbound frame. Malformed input is logged and dropped."""
        try:
            msg = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"[WS] Ignoring invalid JSON: {raw[:100]!r}")
            return
        if not isinstance(msg, dict):
            logger.warning(f"[WS] Ignoring non-object payload: {raw[:100]!r}")
            return

        msg_type = msg.get("type", "")
        if msg_type == EventType.JOIN.value:
            try:
                join = JoinRequest.model_validate(msg)
            except ValidationError as e:
                logger.warning(f"[WS] Ignoring malformed join: {e.error_count()} errors")
                return
            await self.join(join)
        else:
            logger.warning(f"[WS] Unknown message type: {msg_type}")

    async def join(self, join: JoinRequest) -> bool:
        """Attach an identity to the connection.

        The snapshot is loaded before the identity is recorded, so a store
        failure leaves the connection CONNECTED and able to join again.

        :return: False if the connection already joined, is closed, or the
            snapshot could not be loaded
        """
        if self.connection.state != ConnectionState.CONNECTED:
            logger.debug(f"[WS] Ignoring join of '{join.username}' in state {self.connection.state.value}")
            return False

        try:
            messages = await self.store.list_messages()
        except MessageStoreError as e:
            logger.error(f"[WS] Join of '{join.username}' failed, snapshot unavailable: {e}")
            return False

        self.connection.user_id = join.user_id
        self.connection.username = join.username
        self.connection.state = ConnectionState.JOINED

        await self.broadcaster.send_to(self.connection, initial_messages_event(messages))
        await self.broadcaster.broadcast(
            presence_event(EventType.USER_JOINED, join.username, self.registry.size)
        )
        logger.info(f"[WS] '{join.username}' joined ({self.registry.size} online)")
        return True

    async def close(self) -> None:
        """Tear down the connection. Safe to call more than once."""
        if self.connection.state == ConnectionState.CLOSED:
            return
        was_joined = self.connection.has_joined
        self.connection.state = ConnectionState.CLOSED
        self.registry.remove(self.connection)

        if was_joined:
            await self.broadcaster.broadcast(
                presence_event(EventType.USER_LEFT, self.connection.username, self.registry.size)
            )
            logger.info(f"[WS] '{self.connection.username}' left ({self.registry.size} online)")
