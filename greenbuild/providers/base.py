"""Abstract generative model provider interface."""

from __future__ import annotations

import abc
from typing import Any


class GenerativeModelProvider(abc.ABC):
    """Base class for external text-generation services.

    Implementations override :meth:`generate`, which accepts a prompt and
    an optional JSON schema for the expected output and returns the raw
    response text.  Failures are reported by raising
    :class:`~greenbuild.errors.TransientProviderError` (including
    :class:`~greenbuild.errors.RateLimitedError`) or
    :class:`~greenbuild.errors.PermanentProviderError`.
    """

    @abc.abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        schema: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> str:
        """Send *prompt* to the model and return the raw response text."""

    def chat(
        self,
        system: str,
        messages: list[dict[str, str]],
        *,
        timeout: float | None = None,
    ) -> str:
        """Multi-turn completion.  Defaults to a flattened single prompt."""
        transcript = "\n".join(
            f"{'User' if m.get('role') == 'user' else 'Assistant'}: {m.get('content', '')}"
            for m in messages
        )
        return self.generate(f"{system}\n\n{transcript}", timeout=timeout)

    @abc.abstractmethod
    def is_available(self) -> bool:
        """Return *True* if the provider is ready to serve requests."""
