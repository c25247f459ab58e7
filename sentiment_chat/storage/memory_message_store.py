from datetime import datetime, timezone
import logging
import threading
from typing import Dict, List, Optional

from ..chat_models import ChatMessage, Sentiment
from .message_store import MessageStore

logger = logging.getLogger(__name__)


class MemoryMessageStore(MessageStore):
    """Message store with in-memory tracking."""
    def __init__(self):
        self._messages: Dict[int, ChatMessage] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    async def create_message(self, *, user_id: str, username: str, text: str) -> ChatMessage:
        with self._lock:
            message = ChatMessage(
                id=self._next_id,
                user_id=user_id,
                username=username,
                text=text,
                sentiment=Sentiment.PENDING,
                created_at=datetime.now(timezone.utc),
            )
            self._next_id += 1
            self._messages[message.id] = message
        logger.debug(f"[STORE] Created message {message.id} from '{username}'")
        return message.model_copy()

    async def list_messages(self) -> List[ChatMessage]:
        with self._lock:
            messages = [m.model_copy() for m in self._messages.values()]
        return sorted(messages, key=lambda m: m.id)

    async def get_message(self, message_id: int) -> Optional[ChatMessage]:
        with self._lock:
            message = self._messages.get(message_id)
            return message.model_copy() if message else None

    async def update_sentiment(self, message_id: int, sentiment: Sentiment) -> Optional[ChatMessage]:
        with self._lock:
            message = self._messages.get(message_id)
            if message is None:
                logger.debug(f"[STORE] Message {message_id} not found, sentiment not updated")
                return None
            updated = message.model_copy(update={"sentiment": sentiment})
            self._messages[message_id] = updated
        logger.debug(f"[STORE] Message {message_id} sentiment → {sentiment.value}")
        return updated.model_copy()

    async def clear(self) -> None:
        with self._lock:
            count = len(self._messages)
            self._messages = {}
        logger.info(f"[STORE] Cleared {count} messages")

    @property
    def message_count(self) -> int:
        with self._lock:
            return len(self._messages)
