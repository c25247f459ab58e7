from abc import ABC, abstractmethod
from typing import List, Optional

from ..chat_models import ChatMessage, Sentiment


class MessageStore(ABC):
    """Base class for message stores.

    A store exclusively owns its messages. Callers receive copies and refer
    to messages by id only, so nothing outside the store can mutate a record.
    Ids are assigned monotonically and never reused, not even after clear().
    """

    @abstractmethod
    async def create_message(self, *, user_id: str, username: str, text: str) -> ChatMessage:
        """Store a new message with pending sentiment and return it."""
        raise NotImplementedError("Subclasses must implement create_message")

    @abstractmethod
    async def list_messages(self) -> List[ChatMessage]:
        """Return all messages in creation order (ascending id)."""
        raise NotImplementedError("Subclasses must implement list_messages")

    @abstractmethod
    async def get_message(self, message_id: int) -> Optional[ChatMessage]:
        """Return a message by id, or None if it does not exist."""
        raise NotImplementedError("Subclasses must implement get_message")

    @abstractmethod
    async def update_sentiment(self, message_id: int, sentiment: Sentiment) -> Optional[ChatMessage]:
        """Set the sentiment of a message.

        :return: The updated message, or None if the id is not present
        """
        raise NotImplementedError("Subclasses must implement update_sentiment")

    @abstractmethod
    async def clear(self) -> None:
        """Remove all messages. The id sequence continues where it was."""
        raise NotImplementedError("Subclasses must implement clear")

    async def close(self) -> None:
        """Release substrate resources. The default implementation does nothing."""
        pass
