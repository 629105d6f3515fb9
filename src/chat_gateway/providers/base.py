"""Provider-agnostic base interfaces and helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType
from typing import Any

import httpx

from chat_gateway.errors import InvalidResponseError, ProviderError
from chat_gateway.types import Message, ProviderId

DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7
_SNIPPET_CHARS = 200


class BaseProvider(ABC):
    """Abstract base class for provider adapters.

    An adapter owns one ``httpx.AsyncClient`` for the lifetime of a single
    request and is meant to be used as an async context manager.
    """

    name: ProviderId

    def __init__(
        self,
        *,
        base_url: str,
        headers: dict[str, str],
        timeout_s: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout_s, transport=transport)
        self._headers = headers

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> BaseProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def call(self, messages: Sequence[Message], model: str | None = None) -> str:
        """Send the conversation and return the reply text."""
        payload = self._build_payload(messages, model)
        data = await self._post_json(self._chat_path, payload)
        return self._extract_text(data)

    @property
    @abstractmethod
    def _chat_path(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def _build_payload(self, messages: Sequence[Message], model: str | None) -> dict[str, Any]:
        """Translate normalized messages into the provider's request body."""
        raise NotImplementedError

    @abstractmethod
    def _extract_text(self, data: Any) -> str:
        """Pull the reply text out of a decoded response body."""
        raise NotImplementedError

    async def _post_json(self, path: str, payload: dict[str, Any]) -> Any:
        response = await self._client.post(path, headers=self._headers, json=payload)
        return self._json_or_error(response)

    def _json_or_error(self, response: httpx.Response) -> Any:
        if response.status_code >= 400:
            raise ProviderError(
                self.name.value,
                _error_detail(response),
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(
                self.name.value, f"Response body is not JSON: {response.text[:_SNIPPET_CHARS]!r}"
            ) from exc


def extract_completion_text(provider: ProviderId, data: Any) -> str:
    """Return ``choices[0].message.content`` of a chat-completions body."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise InvalidResponseError(provider.value, "Invalid response format") from exc
    if not isinstance(content, str) or not content:
        raise InvalidResponseError(provider.value, "Invalid response format")
    return content


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:_SNIPPET_CHARS] or response.reason_phrase

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.text[:_SNIPPET_CHARS] or response.reason_phrase
