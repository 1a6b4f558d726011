"""Ollama-compatible HTTP provider.

Speaks the Ollama JSON API (``/api/generate`` and ``/api/chat``) over
plain ``urllib``.  Any server exposing that API works, local or hosted.
"""

from __future__ import annotations

import json
import logging
import socket
import urllib.error
import urllib.request
from typing import Any

from greenbuild.errors import PermanentProviderError, RateLimitedError, TransientProviderError
from greenbuild.providers.base import GenerativeModelProvider

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "http://localhost:11434"
_DEFAULT_MODEL = "mistral"


class OllamaProvider(GenerativeModelProvider):
    """Provider that calls an Ollama server.

    Parameters
    ----------
    base_url:
        Server root, e.g. ``http://localhost:11434``.
    model:
        Model tag to request.
    timeout:
        Default per-request timeout in seconds.
    api_key:
        Optional bearer token for hosted gateways.
    """

    def __init__(
        self,
        *,
        base_url: str = _DEFAULT_BASE_URL,
        model: str = _DEFAULT_MODEL,
        timeout: float = 30.0,
        api_key: str = "",
        temperature: float = 0.3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.api_key = api_key
        self.temperature = temperature

    def is_available(self) -> bool:
        """Check if the server is up by listing its models."""
        if not self.base_url:
            return False
        try:
            req = urllib.request.Request(f"{self.base_url}/api/tags", headers=self._headers())
            with urllib.request.urlopen(req, timeout=2) as resp:
                return resp.status == 200
        except (urllib.error.URLError, OSError, TimeoutError):
            return False

    def generate(
        self,
        prompt: str,
        *,
        schema: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> str:
        """Send a single prompt and return the ``response`` text.

        When *schema* is given it is passed as the ``format`` constraint,
        otherwise plain JSON mode is requested.
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "format": schema if schema is not None else "json",
            "options": {
                "temperature": self.temperature,
                "top_p": 0.9,
            },
        }
        body = self._post("/api/generate", payload, timeout)
        text = body.get("response")
        if not isinstance(text, str):
            raise TransientProviderError("Model response has no 'response' text")
        return text

    def chat(
        self,
        system: str,
        messages: list[dict[str, str]],
        *,
        timeout: float | None = None,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system}, *messages],
            "stream": False,
            "options": {
                "temperature": 0.7,
                "num_predict": 500,
            },
        }
        body = self._post("/api/chat", payload, timeout)
        message = body.get("message") or {}
        text = message.get("content") if isinstance(message, dict) else None
        if not isinstance(text, str):
            raise TransientProviderError("Chat response has no message content")
        return text

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, path: str, payload: dict[str, Any], timeout: float | None) -> dict[str, Any]:
        """POST *payload* and return the decoded JSON body.

        Maps every transport failure onto the provider error taxonomy.
        """
        if not self.base_url:
            raise PermanentProviderError("No model server URL configured")

        req = urllib.request.Request(
            f"{self.base_url}{path}",
            data=json.dumps(payload).encode("utf-8"),
            headers=self._headers(),
            method="POST",
        )
        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            with urllib.request.urlopen(req, timeout=effective_timeout) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            if exc.code == 429:
                raise RateLimitedError(f"Model server rate limited the request: {exc.reason}") from exc
            raise TransientProviderError(
                f"Model server returned HTTP {exc.code}: {exc.reason}", status=exc.code,
            ) from exc
        except urllib.error.URLError as exc:
            timed_out = isinstance(exc.reason, (TimeoutError, socket.timeout))
            raise TransientProviderError(
                f"Model server unreachable: {exc.reason}", timeout=timed_out,
            ) from exc
        except (TimeoutError, socket.timeout) as exc:
            raise TransientProviderError("Model request timed out", timeout=True) from exc
        except OSError as exc:
            raise TransientProviderError(f"Model request failed: {exc}") from exc

        try:
            body = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Model server returned non-JSON body: %s", raw[:200])
            raise TransientProviderError("Model server returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise TransientProviderError("Model server returned an unexpected body")
        return body
