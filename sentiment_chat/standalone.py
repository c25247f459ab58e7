"""Standalone chat server — run sentiment-chat without a host app.

Usage::

    poetry run sentiment-chat

    # Custom port / faster sentiment:
    PORT=9000 SENTIMENT_DELAY_MS=500 poetry run sentiment-chat

Environment variables:
    HOST                — Bind address (default: 0.0.0.0)
    PORT                — Server port (default: 8000)
    SENTIMENT_DELAY_MS  — Delay before a message is analyzed (default: 3000)
    WS_PATH             — WebSocket path (default: /ws)
    MESSAGE_STORE       — "memory" (default) or "mongodb"
    MONGODB_CONNECTION  — MongoDB URI for the mongodb store
    MONGODB_DB          — MongoDB database (default: sentiment_chat)
    MONGODB_COLLECTION  — MongoDB collection (default: messages)

Loads .env from the current working directory or any parent directory.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


# ── FastAPI app factory ──────────────────────────────────────────

def create_app(config=None, *, room=None):
    """Create the FastAPI application.

    Also called by uvicorn in reload mode via the factory=True flag, in
    which case the config is read from the environment.

    :param config: Optional ChatServerConfig, defaults to ChatServerConfig.from_env()
    :param room: Optional pre-built ChatRoom (tests inject one to inspect its state)
    """
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    from fastapi import FastAPI

    from sentiment_chat.chat_room import ChatRoom
    from sentiment_chat.config import ChatServerConfig
    from sentiment_chat.server import get_router

    if room is None:
        room = ChatRoom(config or ChatServerConfig.from_env())

    @asynccontextmanager
    async def lifespan(_a):
        logger.info(f"[APP] Chat room ready (ws: {room.config.ws_path}, "
                    f"store: {type(room.store).__name__}, "
                    f"sentiment delay: {room.config.sentiment_delay}s)")
        yield
        await room.shutdown()

    _app = FastAPI(title="sentiment-chat", docs_url=None, redoc_url=None, lifespan=lifespan)
    _app.state.chat_room = room
    _app.include_router(get_router(room))
    return _app


# ── Entry point ──────────────────────────────────────────────────

def main():
    """Load .env, configure logging, and start the server."""
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    reload = os.environ.get("RELOAD", "0") == "1"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )

    print(f"\n  sentiment-chat → http://localhost:{port}\n")
    uvicorn.run(
        "sentiment_chat.standalone:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        reload_dirs=[str(Path(__file__).resolve().parent)] if reload else None,
    )


if __name__ == "__main__":
    main()
