from typing import Any, List, Optional


class ChatError(Exception):
    """Base class for sentiment-chat errors."""


class MessageValidationError(ChatError):
    """Raised when a message submission does not match the schema."""
    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        self.errors = errors or []
        super().__init__(message)


class MessageStoreError(ChatError):
    """Raised when the persistence substrate behind a message store fails."""
