"""Server integration helpers (framework-agnostic).

Host apps call get_router(room) to mount the chat HTTP API and WebSocket.
"""

import logging

from .chat_room import ChatRoom
from .errors import MessageStoreError, MessageValidationError

logger = logging.getLogger(__name__)

# API path constants
API_MESSAGE = "/message"
API_MESSAGES = "/messages"


def build_message_router(room: ChatRoom):
    """Build the FastAPI APIRouter with the message submission and history endpoints."""
    from fastapi import APIRouter, Request
    from fastapi.responses import JSONResponse

    router = APIRouter(prefix=room.config.api_prefix)

    @router.post(API_MESSAGE)
    async def post_message(request: Request):
        """Accept a new message; sentiment follows later over the WebSocket."""
        try:
            data = await request.json()
        except ValueError:
            logger.warning("[INGEST] Rejected submission with invalid JSON body")
            return JSONResponse(status_code=400, content={"error": "Invalid message data"})
        if not isinstance(data, dict):
            return JSONResponse(status_code=400, content={"error": "Invalid message data"})

        try:
            new_message = room.ingestion.validate(data)
            message = await room.ingestion.submit(
                user_id=new_message.user_id,
                username=new_message.username,
                text=new_message.text,
            )
        except MessageValidationError as e:
            logger.warning(f"[INGEST] Rejected submission: {len(e.errors)} validation errors")
            return JSONResponse(status_code=400, content={"error": "Invalid message data"})
        except MessageStoreError as e:
            logger.error(f"[INGEST] Message creation failed: {e}")
            return JSONResponse(status_code=500, content={"error": "Failed to create message"})

        return {"success": True, "message": message.to_wire()}

    @router.get(API_MESSAGES)
    async def get_messages():
        """Full message history in creation order."""
        try:
            messages = await room.store.list_messages()
        except MessageStoreError as e:
            logger.error(f"[STORE] Messages fetch failed: {e}")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch messages"})
        return [m.to_wire() for m in messages]

    return router


def build_ws_router(room: ChatRoom):
    """Build a FastAPI APIRouter with the chat WebSocket endpoint."""
    from fastapi import APIRouter
    from starlette.websockets import WebSocket

    router = APIRouter()

    @router.websocket(room.config.ws_path)
    async def websocket_chat(ws: WebSocket):
        """WebSocket endpoint: join protocol plus room-wide events."""
        await ws.accept()
        session = room.create_session(ws)
        session.open()
        await session.run()

    return router


def get_router(room: ChatRoom):
    """Return the combined FastAPI APIRouter for WebSocket + HTTP endpoints."""
    from fastapi import APIRouter

    router = APIRouter()
    router.include_router(build_message_router(room))
    router.include_router(build_ws_router(room))
    return router
