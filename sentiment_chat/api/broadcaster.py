import json
import logging

from .connection_registry import ChatConnection, ConnectionRegistry

logger = logging.getLogger(__name__)


class Broadcaster:
    """Sends events to every open connection of a registry.

    Each event is serialized once. Connections are visited one after the
    other in registration order, so a single connection receives events in
    the order broadcast() was called.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def broadcast(self, event: dict) -> int:
        """Deliver an event to all open connections.

        Connections that are not open are skipped. A failed send closes that
        connection so its own teardown path removes it; the broadcast itself
        never fails.

        :return: Number of connections the event was delivered to
        """
        payload = json.dumps(event)
        delivered = 0
        for connection in self.registry.snapshot():
            if not connection.is_open:
                continue
            if await self._deliver(connection, payload):
                delivered += 1
        logger.debug(f"[BROADCAST] {event.get('type')} → {delivered}/{self.registry.size} connections")
        return delivered

    async def send_to(self, connection: ChatConnection, event: dict) -> bool:
        """Send an event to a single connection, if it is open."""
        if not connection.is_open:
            return False
        return await self._deliver(connection, json.dumps(event))

    async def _deliver(self, connection: ChatConnection, payload: str) -> bool:
        try:
            await connection.send_text(payload)
            return True
        except Exception as e:
            logger.warning(f"[BROADCAST] Send to '{connection.username or '<anonymous>'}' failed: "
                           f"{type(e).__name__}: {e}")
            try:
                await connection.close()
            except Exception as close_error:
                logger.debug(f"[BROADCAST] Close after failed send failed: {close_error}")
            return False
