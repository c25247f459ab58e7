import logging
from datetime import datetime, timezone
from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import PyMongoError
from motor.motor_asyncio import AsyncIOMotorClient

from ..chat_models import ChatMessage, Sentiment
from ..errors import MessageStoreError
from .message_store import MessageStore

logger = logging.getLogger(__name__)


class MongoDBMessageStore(MessageStore):
    """Message store backed by MongoDB.

    Ids come from a separate counters collection which is incremented
    atomically, so concurrent writers never receive the same id and ids
    survive clear().
    """
    def __init__(self, *, mongo_uri: str, mongo_db: str, mongo_collection: str):
        if not mongo_uri or not mongo_db or not mongo_collection:
            raise ValueError("MongoDB URI, database, and collection are required")
        self.mongo_uri = mongo_uri
        self.mongo_db = mongo_db
        self.mongo_collection = mongo_collection
        self._client = AsyncIOMotorClient(mongo_uri, tz_aware=True)
        self._coll = self._client[mongo_db][mongo_collection]
        self._counters = self._client[mongo_db][f"{mongo_collection}_counters"]

    async def _next_id(self) -> int:
        result = await self._counters.find_one_and_update(
            {"_id": self.mongo_collection},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(result["seq"])

    @staticmethod
    def _to_document(message: ChatMessage) -> dict:
        doc = message.model_dump(by_alias=True)
        doc["_id"] = doc.pop("id")
        doc["sentiment"] = message.sentiment.value
        return doc

    @staticmethod
    def _from_document(doc: dict) -> ChatMessage:
        data = dict(doc)
        data["id"] = data.pop("_id")
        return ChatMessage.model_validate(data)

    async def create_message(self, *, user_id: str, username: str, text: str) -> ChatMessage:
        try:
            message = ChatMessage(
                id=await self._next_id(),
                user_id=user_id,
                username=username,
                text=text,
                sentiment=Sentiment.PENDING,
                created_at=datetime.now(timezone.utc),
            )
            await self._coll.insert_one(self._to_document(message))
        except PyMongoError as e:
            raise MessageStoreError(f"Failed to create message in MongoDB: {e}")
        logger.debug(f"[STORE] Created message {message.id} in {self.mongo_db}.{self.mongo_collection}")
        return message

    async def list_messages(self) -> List[ChatMessage]:
        try:
            cursor = self._coll.find({}).sort("_id", ASCENDING)
            return [self._from_document(doc) async for doc in cursor]
        except PyMongoError as e:
            raise MessageStoreError(f"Failed to list messages from MongoDB: {e}")

    async def get_message(self, message_id: int) -> Optional[ChatMessage]:
        try:
            doc = await self._coll.find_one({"_id": message_id})
        except PyMongoError as e:
            raise MessageStoreError(f"Failed to get message from MongoDB: {e}")
        return self._from_document(doc) if doc else None

    async def update_sentiment(self, message_id: int, sentiment: Sentiment) -> Optional[ChatMessage]:
        try:
            doc = await self._coll.find_one_and_update(
                {"_id": message_id},
                {"$set": {"sentiment": sentiment.value}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise MessageStoreError(f"Failed to update sentiment in MongoDB: {e}")
        if doc is None:
            logger.debug(f"[STORE] Message {message_id} not found, sentiment not updated")
            return None
        return self._from_document(doc)

    async def clear(self) -> None:
        try:
            result = await self._coll.delete_many({})
        except PyMongoError as e:
            raise MessageStoreError(f"Failed to clear messages in MongoDB: {e}")
        logger.info(f"[STORE] Cleared {result.deleted_count} messages")

    async def close(self) -> None:
        self._client.close()
