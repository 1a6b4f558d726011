"""Chat assistant over the generative model provider."""

from greenbuild.assistant.chat import (
    CHAT_MAX_ATTEMPTS,
    CHAT_RATE_LIMIT_BACKOFF_SECONDS,
    FALLBACK_MESSAGE,
    SYSTEM_CONTEXT,
    ChatAssistant,
    ChatMessage,
    ChatReply,
)

__all__ = [
    "CHAT_MAX_ATTEMPTS",
    "CHAT_RATE_LIMIT_BACKOFF_SECONDS",
    "FALLBACK_MESSAGE",
    "SYSTEM_CONTEXT",
    "ChatAssistant",
    "ChatMessage",
    "ChatReply",
]
