"""Generative model providers — abstract base + concrete HTTP provider."""

from greenbuild.providers.base import GenerativeModelProvider
from greenbuild.providers.ollama import OllamaProvider

__all__ = ["GenerativeModelProvider", "OllamaProvider"]
