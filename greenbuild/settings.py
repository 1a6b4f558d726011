"""Configuration: layered key/value loading and the typed Settings model."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Every recognised key; values are strings until Settings coerces them
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "GREENBUILD_ENV": {"default": "development", "description": "Environment profile"},
    "GREENBUILD_LLM_BASE_URL": {"default": "http://localhost:11434", "description": "Model server (Ollama API)"},
    "GREENBUILD_LLM_MODEL": {"default": "mistral", "description": "Model tag"},
    "GREENBUILD_LLM_API_KEY": {"default": "", "description": "Bearer token for hosted gateways", "secret": True},
    "GREENBUILD_LLM_TIMEOUT": {"default": "30", "description": "Per-call timeout, seconds"},
    "GREENBUILD_RETRY_BACKOFF": {"default": "1.5", "description": "Delay before the retry, seconds"},
    "GREENBUILD_CATALOG_PATH": {"default": "", "description": "Material catalog CSV (empty = embedded)"},
    "GREENBUILD_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "GREENBUILD_ENV": "development",
        "GREENBUILD_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "GREENBUILD_ENV": "production",
        "GREENBUILD_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "GREENBUILD_ENV": "testing",
        "GREENBUILD_LOG_LEVEL": "DEBUG",
        "GREENBUILD_LLM_BASE_URL": "",
        "GREENBUILD_RETRY_BACKOFF": "0",
    },
}


class Settings(BaseModel):
    """Typed view of the merged configuration."""

    model_config = ConfigDict(frozen=True)

    env: str = "development"
    llm_base_url: str = "http://localhost:11434"
    llm_model: str = "mistral"
    llm_api_key: str = Field(default="", repr=False)
    llm_timeout: float = 30.0
    retry_backoff: float = 1.5
    catalog_path: str = ""
    log_level: str = "INFO"

    @classmethod
    def from_config(cls, config: dict[str, str]) -> Settings:
        prefix = "GREENBUILD_"
        values = {
            key[len(prefix):].lower(): val
            for key, val in config.items()
            if key.startswith(prefix) and key in _CONFIG_KEYS
        }
        return cls.model_validate(values)


class ConfigManager:
    """Resolve GreenBuild configuration from layered sources.

    Layers, lowest precedence first: built-in defaults, the profile named
    by ``GREENBUILD_ENV``, ``.greenbuild/config.json``, ``.env`` and the
    process environment.  Unknown keys in files are ignored.
    """

    prefix = "GREENBUILD_"

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    # -- Layers ---------------------------------------------------------------

    def _normalize_key(self, key: str) -> str | None:
        """Map ``llm_model`` or ``GREENBUILD_LLM_MODEL`` to the canonical key."""
        key = key.strip().upper()
        if not key.startswith(self.prefix):
            key = self.prefix + key
        return key if key in _CONFIG_KEYS else None

    def _json_layer(self, root: Path) -> dict[str, str]:
        path = root / ".greenbuild" / "config.json"
        if not path.is_file():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Could not read %s", path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is not an object", path)
            return {}
        layer: dict[str, str] = {}
        for raw_key, value in data.items():
            key = self._normalize_key(str(raw_key))
            if key is None:
                logger.debug("Ignoring unknown config key %r in %s", raw_key, path)
                continue
            layer[key] = str(value)
        return layer

    def _dotenv_layer(self, root: Path) -> dict[str, str]:
        path = root / ".env"
        if not path.is_file():
            return {}
        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            logger.warning("Could not read %s", path, exc_info=True)
            return {}
        layer: dict[str, str] = {}
        for line in text.splitlines():
            line = line.strip()
            if line.startswith("export "):
                line = line[len("export "):]
            name, sep, value = line.partition("=")
            if not sep or line.startswith("#"):
                continue
            key = self._normalize_key(name)
            if key is not None:
                layer[key] = value.strip().strip("'\"")
        return layer

    def _environ_layer(self) -> dict[str, str]:
        return {key: self._environ[key] for key in _CONFIG_KEYS if key in self._environ}

    def layers(self, project_path: str | Path = ".") -> list[tuple[str, dict[str, str]]]:
        """Return ``(name, values)`` for every source, lowest precedence first."""
        root = Path(project_path)
        defaults = {key: str(info["default"]) for key, info in _CONFIG_KEYS.items()}
        json_layer = self._json_layer(root)
        dotenv_layer = self._dotenv_layer(root)
        environ_layer = self._environ_layer()

        # The profile is chosen by the highest layer that names one
        env_name = defaults["GREENBUILD_ENV"]
        for layer in (json_layer, dotenv_layer, environ_layer):
            env_name = layer.get("GREENBUILD_ENV", env_name)
        if env_name not in _PROFILES:
            logger.warning("Unknown GREENBUILD_ENV profile %r; using defaults only", env_name)

        return [
            ("defaults", defaults),
            (f"profile:{env_name}", dict(_PROFILES.get(env_name, {}))),
            ("config.json", json_layer),
            (".env", dotenv_layer),
            ("environment", environ_layer),
        ]

    # -- Public API -----------------------------------------------------------

    def load_config(self, project_path: str | Path = ".") -> dict[str, str]:
        """Merge all layers into one flat ``GREENBUILD_*`` dict."""
        config: dict[str, str] = {}
        for _, values in self.layers(project_path):
            config.update(values)
        return config

    def config_sources(self, project_path: str | Path = ".") -> dict[str, str]:
        """Name the layer that supplied each effective value."""
        sources: dict[str, str] = {}
        for name, values in self.layers(project_path):
            for key in values:
                sources[key] = name
        return sources

    def load_settings(self, project_path: str | Path = ".") -> Settings:
        return Settings.from_config(self.load_config(project_path))

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Write ``.env.example`` listing every key; secrets are left blank."""
        path = Path(project_path) / ".env.example"
        path.write_text(render_env_template(), encoding="utf-8")
        return path


def render_env_template() -> str:
    out = [
        "# GreenBuild settings. Copy to .env; environment variables take precedence.",
        f"# Profiles for GREENBUILD_ENV: {', '.join(_PROFILES)}",
    ]
    for key, info in _CONFIG_KEYS.items():
        value = "" if info.get("secret") else info["default"]
        out.append("")
        out.append(f"# {info['description']}")
        out.append(f"{key}={value}")
    return "\n".join(out) + "\n"


def configure_logging(level: str | int = "INFO") -> None:
    """Set the level of the ``greenbuild`` logger hierarchy.

    Handlers are left to the application.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.getLogger("greenbuild").setLevel(level)
