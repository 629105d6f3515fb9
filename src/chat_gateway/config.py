"""Configuration snapshot for the gateway."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, field_validator

DEFAULT_OPENAI_API_BASE = "https://api.openai.com/v1"
DEFAULT_HUGGINGFACE_API_BASE = (
    "https://api-inference.huggingface.co/models/mistralai/Mistral-7B-Instruct-v0.2"
)

_ENV_FIELDS = {
    "openai_api_key": "OPENAI_API_KEY",
    "openai_api_base": "OPENAI_API_BASE",
    "huggingface_api_key": "HUGGINGFACE_API_KEY",
    "huggingface_api_base": "HUGGINGFACE_API_BASE",
    "local_llm_api_base": "LOCAL_LLM_API_BASE",
    "local_llm_model": "LOCAL_LLM_MODEL",
    "discovery_timeout_s": "LLM_DISCOVERY_TIMEOUT",
    "chat_timeout_s": "LLM_CHAT_TIMEOUT",
}


class GatewaySettings(BaseModel):
    """Credentials, base URLs and timeouts supplied by the environment."""

    model_config = {"frozen": True}

    openai_api_key: str | None = None
    openai_api_base: str = DEFAULT_OPENAI_API_BASE
    huggingface_api_key: str | None = None
    huggingface_api_base: str = DEFAULT_HUGGINGFACE_API_BASE
    local_llm_api_base: str | None = None
    local_llm_model: str | None = None
    discovery_timeout_s: float = 5.0
    chat_timeout_s: float = 60.0

    @field_validator(
        "openai_api_key",
        "huggingface_api_key",
        "local_llm_api_base",
        "local_llm_model",
        mode="before",
    )
    @classmethod
    def _blank_is_absent(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("openai_api_base", "huggingface_api_base", "local_llm_api_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GatewaySettings:
        """Build a settings snapshot from environment variables."""
        env = os.environ if environ is None else environ
        values = {
            field: env[name]
            for field, name in _ENV_FIELDS.items()
            if env.get(name, "").strip()
        }
        return cls(**values)
