"""ChatAssistant — stateless Q&A over the generative model provider.

Independent of the decision and recommendation core: no bill or catalog
is involved, and failures become a friendly message rather than an error.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from greenbuild.errors import ProviderError, RateLimitedError
from greenbuild.providers.base import GenerativeModelProvider

logger = logging.getLogger(__name__)

CHAT_MAX_ATTEMPTS = 2
CHAT_RATE_LIMIT_BACKOFF_SECONDS = 2.0

FALLBACK_MESSAGE = "I'm having trouble connecting right now. Please try again in a moment!"

SYSTEM_CONTEXT = """\
You are GreenBuild AI Assistant, a friendly and knowledgeable sustainability
expert for construction projects.

Your expertise includes:
- Embodied carbon in building materials (concrete, steel, timber, glass, insulation)
- Green building certifications (LEED, BREEAM, Passive House, RIBA 2030)
- Sustainable material alternatives and their tradeoffs
- Carbon footprint calculations and reduction strategies
- Cost vs. sustainability optimization
- Local and regional building regulations

Communication style:
- Be helpful, encouraging and positive; use simple language
- Provide actionable advice and mention both pros and cons of materials
- Politely redirect questions outside construction sustainability
- Keep responses to 2-4 short paragraphs unless more detail is requested

If users ask about their specific project, point them to the Analyze feature
for detailed calculations.
"""


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatReply(BaseModel):
    message: str
    success: bool = True


class ChatAssistant:
    """Answers free-form sustainability questions.

    Only rate-limit errors are retried, once, after a short delay.
    """

    def __init__(
        self,
        provider: GenerativeModelProvider,
        *,
        timeout: float = 30.0,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.provider = provider
        self.timeout = timeout
        self._sleep = sleep

    def reply(
        self,
        message: str,
        history: Sequence[ChatMessage | dict[str, str]] | None = None,
    ) -> ChatReply:
        """Answer *message* given prior *history*.

        Raises
        ------
        ValueError
            *message* is empty.
        """
        if not isinstance(message, str) or not message.strip():
            raise ValueError("Message is required")

        messages = [
            {"role": "user" if m.role == "user" else "assistant", "content": m.content}
            for m in (ChatMessage.model_validate(h) if isinstance(h, dict) else h for h in history or [])
        ]
        messages.append({"role": "user", "content": message})

        attempt = 0
        while attempt < CHAT_MAX_ATTEMPTS:
            attempt += 1
            try:
                text = self.provider.chat(SYSTEM_CONTEXT, messages, timeout=self.timeout)
                return ChatReply(message=text.strip(), success=True)
            except RateLimitedError:
                if attempt < CHAT_MAX_ATTEMPTS:
                    logger.info("Chat rate limited; retrying in %.1fs", CHAT_RATE_LIMIT_BACKOFF_SECONDS)
                    self._sleep(CHAT_RATE_LIMIT_BACKOFF_SECONDS)
                    continue
                logger.warning("Chat rate limited on final attempt")
                break
            except ProviderError as exc:
                logger.warning("Chat provider error: %s", exc)
                break

        return ChatReply(message=FALLBACK_MESSAGE, success=False)
