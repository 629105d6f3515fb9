"""OpenAI provider implementation (hosted-commercial)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from chat_gateway.config import DEFAULT_OPENAI_API_BASE
from chat_gateway.providers.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    BaseProvider,
    extract_completion_text,
)
from chat_gateway.types import Message, ProviderId

DEFAULT_MODEL = "gpt-3.5-turbo"
KNOWN_MODELS: tuple[tuple[str, str], ...] = (
    ("gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ("gpt-4", "GPT-4"),
    ("gpt-4-turbo", "GPT-4 Turbo"),
)


class OpenAIProvider(BaseProvider):
    """Minimal async wrapper for the OpenAI Chat Completions API."""

    name = ProviderId.HOSTED_COMMERCIAL
    _chat_path = "/chat/completions"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str | None = None,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url or DEFAULT_OPENAI_API_BASE,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout_s=timeout_s,
            transport=transport,
        )

    def _build_payload(self, messages: Sequence[Message], model: str | None) -> dict[str, Any]:
        return {
            "model": model or DEFAULT_MODEL,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": DEFAULT_MAX_TOKENS,
            "temperature": DEFAULT_TEMPERATURE,
        }

    def _extract_text(self, data: Any) -> str:
        return extract_completion_text(self.name, data)
