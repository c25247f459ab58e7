from .message_store import MessageStore
from .memory_message_store import MemoryMessageStore
from ..config import ChatServerConfig


def create_message_store(config: ChatServerConfig) -> MessageStore:
    """Create the message store selected by ``config.store_backend``."""
    if config.store_backend == ChatServerConfig.MONGODB:
        from .mongodb_message_store import MongoDBMessageStore
        return MongoDBMessageStore(
            mongo_uri=config.mongo_uri,
            mongo_db=config.mongo_db,
            mongo_collection=config.mongo_collection,
        )
    return MemoryMessageStore()


def __getattr__(name):
    """Lazy imports for optional dependencies."""
    if name == "MongoDBMessageStore":
        from .mongodb_message_store import MongoDBMessageStore
        return MongoDBMessageStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'MessageStore',
    'MemoryMessageStore',
    'MongoDBMessageStore',
    'create_message_store',
]
