"""Async gateway facade exposing the inbound operations."""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from chat_gateway.cancellation import CancellationToken
from chat_gateway.catalog import ModelCatalog
from chat_gateway.config import GatewaySettings
from chat_gateway.dispatcher import ChatDispatcher
from chat_gateway.registry import ProviderRegistry
from chat_gateway.retry import RetryController
from chat_gateway.types import ChatRequest, ChatResult, ModelDescriptor, ProviderId


class ChatGateway:
    """High-level coordinator for listing models and chatting with providers."""

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.registry = ProviderRegistry(settings or GatewaySettings.from_env())
        self.catalog = ModelCatalog(self.registry, transport=transport)
        self.dispatcher = ChatDispatcher(self.registry, transport=transport)

    def list_providers(self) -> set[ProviderId]:
        """Return the providers usable under the current settings."""
        return self.registry.list_usable_providers()

    async def list_models(
        self, cancel_token: CancellationToken | None = None
    ) -> list[ModelDescriptor]:
        """Return selectable models across usable providers."""
        return await self.catalog.list_models(cancel_token)

    async def send(
        self,
        req: ChatRequest,
        *,
        cancel_token: CancellationToken | None = None,
        known_models: Sequence[ModelDescriptor] | None = None,
    ) -> ChatResult:
        """Execute a chat request in either addressing form."""
        return await self.dispatcher.send(req, cancel_token=cancel_token, known_models=known_models)

    def retry_controller(
        self,
        *,
        max_attempts: int = 3,
        base_delay_s: float = 1.0,
        max_delay_s: float = 8.0,
    ) -> RetryController:
        """Return a retry controller layered over this gateway's dispatcher."""
        return RetryController(
            self.dispatcher,
            max_attempts=max_attempts,
            base_delay_s=base_delay_s,
            max_delay_s=max_delay_s,
        )
