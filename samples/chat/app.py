#!/usr/bin/env python3
"""Standalone chat app — run sentiment-chat as an HTTP + WebSocket server.

    cd samples/chat
    poetry run python app.py

Starts on http://localhost:8000 with the in-memory message store.

Environment variables:
    PORT                — Server port (default: 8000)
    SENTIMENT_DELAY_MS  — Delay before sentiment analysis (default: 3000)
    MESSAGE_STORE       — Set to mongodb to persist in MongoDB
    MONGODB_CONNECTION  — MongoDB URI for the mongodb store
"""
from sentiment_chat.standalone import main

if __name__ == "__main__":
    main()
