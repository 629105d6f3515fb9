"""Model listing across usable providers."""

from __future__ import annotations

import logging
from typing import cast

import httpx

from chat_gateway.cancellation import CancellationToken
from chat_gateway.errors import ProviderError
from chat_gateway.providers import LocalProvider
from chat_gateway.providers.huggingface import PLACEHOLDER_MODEL_ID, PLACEHOLDER_MODEL_NAME
from chat_gateway.providers.openai import KNOWN_MODELS
from chat_gateway.registry import ProviderRegistry
from chat_gateway.types import ModelDescriptor, ProviderId

logger = logging.getLogger(__name__)


class ModelCatalog:
    """Builds the selectable model list, probing the self-hosted server."""

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._registry = registry
        self._transport = transport

    async def list_models(
        self, cancel_token: CancellationToken | None = None
    ) -> list[ModelDescriptor]:
        """Return descriptors in provider order; empty when nothing is configured."""
        models: list[ModelDescriptor] = []
        for provider in self._registry.ordered_usable_providers():
            if provider is ProviderId.HOSTED_COMMERCIAL:
                models.extend(
                    ModelDescriptor(id=model_id, name=name, provider=provider)
                    for model_id, name in KNOWN_MODELS
                )
            elif provider is ProviderId.HOSTED_OPEN:
                models.append(
                    ModelDescriptor(
                        id=PLACEHOLDER_MODEL_ID, name=PLACEHOLDER_MODEL_NAME, provider=provider
                    )
                )
            elif provider is ProviderId.SELF_HOSTED:
                models.extend(await self._self_hosted_models(cancel_token))
        return models

    async def _self_hosted_models(
        self, cancel_token: CancellationToken | None
    ) -> list[ModelDescriptor]:
        settings = self._registry.settings
        try:
            ids = await self._discover(cancel_token)
        except (httpx.HTTPError, httpx.InvalidURL, ProviderError, ValueError) as exc:
            logger.warning("Self-hosted model discovery failed, using configured model: %s", exc)
            if not settings.local_llm_model:
                return []
            ids = [settings.local_llm_model]
        return [ModelDescriptor(id=i, name=i, provider=ProviderId.SELF_HOSTED) for i in ids]

    async def _discover(self, cancel_token: CancellationToken | None) -> list[str]:
        settings = self._registry.settings
        adapter = cast(
            LocalProvider,
            self._registry.build_adapter(
                ProviderId.SELF_HOSTED,
                transport=self._transport,
                timeout_s=settings.discovery_timeout_s,
            ),
        )
        async with adapter:
            listing = adapter.list_models(timeout_s=settings.discovery_timeout_s)
            if cancel_token is not None:
                return await cancel_token.guard(listing)
            return await listing
