"""Routes a chat request to exactly one provider adapter."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from chat_gateway.cancellation import CancellationToken
from chat_gateway.errors import InvalidRequestError, NormalizedError
from chat_gateway.normalizer import normalize
from chat_gateway.providers.huggingface import PLACEHOLDER_MODEL_ID
from chat_gateway.providers.openai import KNOWN_MODELS
from chat_gateway.registry import ProviderRegistry
from chat_gateway.types import ChatRequest, ChatResult, ModelDescriptor, ProviderId

logger = logging.getLogger(__name__)

COMMERCIAL_MODEL_IDS = frozenset(model_id for model_id, _ in KNOWN_MODELS)


def infer_provider(model_id: str) -> ProviderId:
    """Priority-ordered match: commercial ids, the open placeholder, else self-hosted."""
    if model_id in COMMERCIAL_MODEL_IDS:
        return ProviderId.HOSTED_COMMERCIAL
    if model_id == PLACEHOLDER_MODEL_ID:
        return ProviderId.HOSTED_OPEN
    return ProviderId.SELF_HOSTED


def resolve_provider(
    request: ChatRequest, known_models: Sequence[ModelDescriptor] | None = None
) -> ProviderId:
    """Pick the provider for ``request``.

    An explicit provider always wins. A model id is looked up in the
    caller's last-known catalog listing when one is given, and otherwise
    matched against the static identifiers.
    """
    if request.provider is not None:
        return request.provider

    model_id = request.model_id or ""
    if known_models is not None:
        for descriptor in known_models:
            if descriptor.id == model_id:
                return descriptor.provider

    provider = infer_provider(model_id)
    if known_models is not None and provider is ProviderId.SELF_HOSTED:
        logger.warning("Model %r is not in the catalog; routing to self-hosted", model_id)
    return provider


class ChatDispatcher:
    """Sends one request through one adapter and normalizes the outcome."""

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._registry = registry
        self._transport = transport

    async def send(
        self,
        request: ChatRequest,
        *,
        cancel_token: CancellationToken | None = None,
        known_models: Sequence[ModelDescriptor] | None = None,
    ) -> ChatResult:
        if not request.messages:
            raise InvalidRequestError("Chat request must contain at least one message.")
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        provider = resolve_provider(request, known_models)
        logger.debug("Dispatching chat request to %s (model=%s)", provider.value, request.model_id)

        try:
            text = await self._call(provider, request, cancel_token)
        except NormalizedError:
            raise
        except Exception as exc:
            raise normalize(exc, provider=provider.value) from exc

        return ChatResult(message=text, provider=provider, model=request.model_id)

    async def _call(
        self,
        provider: ProviderId,
        request: ChatRequest,
        cancel_token: CancellationToken | None,
    ) -> str:
        adapter = self._registry.build_adapter(provider, transport=self._transport)
        async with adapter:
            reply = adapter.call(request.messages, request.model_id)
            if cancel_token is not None:
                return await cancel_token.guard(reply)
            return await reply
