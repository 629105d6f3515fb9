"""Self-hosted OpenAI-compatible server implementation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from chat_gateway.errors import InvalidResponseError
from chat_gateway.providers.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    BaseProvider,
    extract_completion_text,
)
from chat_gateway.types import Message, ProviderId

FALLBACK_MODEL = "default"
_MODELS_PATH = "/v1/models"


class LocalProvider(BaseProvider):
    """Adapter for a locally reachable chat-completions server (no auth)."""

    name = ProviderId.SELF_HOSTED
    _chat_path = "/v1/chat/completions"
    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        *,
        base_url: str,
        default_model: str | None = None,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout_s=timeout_s,
            transport=transport,
        )
        self._default_model = default_model

    async def list_models(self, timeout_s: float | None = None) -> list[str]:
        """Ask the server for its model ids, preserving its order."""
        kwargs: dict[str, Any] = {}
        if timeout_s is not None:
            kwargs["timeout"] = timeout_s
        response = await self._client.get(_MODELS_PATH, headers=self._headers, **kwargs)
        data = self._json_or_error(response)

        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise InvalidResponseError(self.name.value, "Model listing has no 'data' array")

        ids: list[str] = []
        for entry in entries:
            model_id = entry.get("id") if isinstance(entry, dict) else None
            if not isinstance(model_id, str) or not model_id:
                raise InvalidResponseError(self.name.value, f"Malformed model entry: {entry!r}")
            ids.append(model_id)
        self._logger.debug("Discovered %d self-hosted model(s)", len(ids))
        return ids

    def _build_payload(self, messages: Sequence[Message], model: str | None) -> dict[str, Any]:
        return {
            "model": model or self._default_model or FALLBACK_MODEL,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": DEFAULT_MAX_TOKENS,
            "temperature": DEFAULT_TEMPERATURE,
            "stream": False,
        }

    def _extract_text(self, data: Any) -> str:
        return extract_completion_text(self.name, data)
