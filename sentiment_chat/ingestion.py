"""Message submission: persist, announce, and analyze later."""

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .api.broadcaster import Broadcaster
from .chat_models import ChatMessage, NewMessage, new_message_event, sentiment_update_event
from .errors import MessageValidationError
from .scheduler import DeferredTaskScheduler
from .sentiment import classify_sentiment
from .storage import MessageStore

logger = logging.getLogger(__name__)


class MessageIngestion:
    """Accepts new messages for a chat room.

    A submitted message is stored as pending and broadcast right away. Its
    sentiment is computed by a deferred task that runs ``sentiment_delay``
    seconds later, independent of whether the submitter is still connected.
    """

    def __init__(
        self,
        *,
        store: MessageStore,
        broadcaster: Broadcaster,
        scheduler: DeferredTaskScheduler,
        sentiment_delay: float = 3.0,
    ):
        self.store = store
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.sentiment_delay = sentiment_delay

    @staticmethod
    def validate(data: Mapping[str, Any]) -> NewMessage:
        """Validate a raw submission payload.

        :raises MessageValidationError: If the payload does not match the schema
        """
        try:
            return NewMessage.model_validate(data)
        except ValidationError as e:
            raise MessageValidationError("Invalid message data", errors=e.errors())

    async def submit(self, *, user_id: str, username: str, text: str) -> ChatMessage:
        """Store, broadcast and schedule analysis of a new message.

        :raises MessageValidationError: If the fields are invalid; nothing is stored then
        """
        new_message = self.validate({"userId": user_id, "username": username, "text": text})
        message = await self.store.create_message(
            user_id=new_message.user_id,
            username=new_message.username,
            text=new_message.text,
        )
        logger.info(f"[INGEST] Message {message.id} from '{message.username}'")

        await self.broadcaster.broadcast(new_message_event(message))

        message_id = message.id
        message_text = message.text
        self.scheduler.schedule(
            self.sentiment_delay,
            lambda: self.analyze(message_id, message_text),
            name=f"sentiment-{message_id}",
        )
        return message

    async def analyze(self, message_id: int, text: str) -> bool:
        """Classify a message, store the label and broadcast it.

        :return: False if the message no longer exists; nothing is broadcast then
        """
        sentiment = classify_sentiment(text)
        updated = await self.store.update_sentiment(message_id, sentiment)
        if updated is None:
            logger.debug(f"[SENTIMENT] Message {message_id} gone, skipping update")
            return False
        await self.broadcaster.broadcast(sentiment_update_event(message_id, sentiment))
        logger.info(f"[SENTIMENT] Message {message_id} → {sentiment.value}")
        return True
