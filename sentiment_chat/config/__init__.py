from .chat_server_config import ChatServerConfig

__all__ = ["ChatServerConfig"]
