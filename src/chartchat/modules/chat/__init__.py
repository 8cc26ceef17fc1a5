"""ChartChat Chat Module - Natural-language chart requests."""

from chartchat.modules.chat.router import router
from chartchat.modules.chat.service import ChatService

__all__ = ["router", "ChatService"]
