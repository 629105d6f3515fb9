"""Hugging Face inference provider implementation (hosted-open)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from chat_gateway.config import DEFAULT_HUGGINGFACE_API_BASE
from chat_gateway.errors import InvalidResponseError
from chat_gateway.providers.base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, BaseProvider
from chat_gateway.types import Message, ProviderId

PLACEHOLDER_MODEL_ID = "huggingface-default"
PLACEHOLDER_MODEL_NAME = "Hugging Face Model"


class HuggingFaceProvider(BaseProvider):
    """Wrapper for a single text-generation inference endpoint.

    The endpoint has no multi-turn structure, so the conversation is
    flattened into one ``role: content`` prompt and ``model`` is ignored.
    """

    name = ProviderId.HOSTED_OPEN

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str | None = None,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = base_url or DEFAULT_HUGGINGFACE_API_BASE
        super().__init__(
            base_url="",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout_s=timeout_s,
            transport=transport,
        )

    @property
    def _chat_path(self) -> str:
        return self._endpoint

    def _build_payload(self, messages: Sequence[Message], model: str | None) -> dict[str, Any]:
        return {
            "inputs": flatten_prompt(messages),
            "parameters": {
                "max_new_tokens": DEFAULT_MAX_TOKENS,
                "temperature": DEFAULT_TEMPERATURE,
                "do_sample": True,
                "top_p": 0.9,
            },
        }

    def _extract_text(self, data: Any) -> str:
        if isinstance(data, str):
            return data
        if isinstance(data, list) and data and isinstance(data[0], dict):
            text = data[0].get("generated_text")
            if isinstance(text, str) and text:
                return text
        if isinstance(data, dict):
            text = data.get("generated_text")
            if isinstance(text, str) and text:
                return text
        raise InvalidResponseError(self.name.value, "Invalid response format")


def flatten_prompt(messages: Sequence[Message]) -> str:
    return "\n".join(f"{m.role}: {m.content}" for m in messages)
