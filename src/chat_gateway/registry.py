"""Which providers are usable under the current configuration."""

from __future__ import annotations

import httpx

from chat_gateway.config import GatewaySettings
from chat_gateway.errors import ProviderError
from chat_gateway.providers import BaseProvider, HuggingFaceProvider, LocalProvider, OpenAIProvider
from chat_gateway.types import PROVIDER_ORDER, ProviderId


class ProviderRegistry:
    """Reports usable providers and builds adapters for them.

    Usability is recomputed from the settings snapshot on every call; the
    registry performs no I/O and caches nothing.
    """

    def __init__(self, settings: GatewaySettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    def is_usable(self, provider: ProviderId) -> bool:
        s = self._settings
        if provider is ProviderId.HOSTED_COMMERCIAL:
            return bool(s.openai_api_key)
        if provider is ProviderId.HOSTED_OPEN:
            return bool(s.huggingface_api_key)
        return bool(s.local_llm_api_base)

    def list_usable_providers(self) -> set[ProviderId]:
        """Return the providers whose credentials or base URL are present."""
        return {p for p in PROVIDER_ORDER if self.is_usable(p)}

    def ordered_usable_providers(self) -> list[ProviderId]:
        return [p for p in PROVIDER_ORDER if self.is_usable(p)]

    def build_adapter(
        self,
        provider: ProviderId,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout_s: float | None = None,
    ) -> BaseProvider:
        """Construct a fresh adapter; the caller owns and closes it."""
        s = self._settings
        timeout = s.chat_timeout_s if timeout_s is None else timeout_s

        if provider is ProviderId.HOSTED_COMMERCIAL:
            if not s.openai_api_key:
                raise ProviderError(provider.value, "OpenAI API key is not configured")
            return OpenAIProvider(
                api_key=s.openai_api_key,
                base_url=s.openai_api_base,
                timeout_s=timeout,
                transport=transport,
            )
        if provider is ProviderId.HOSTED_OPEN:
            if not s.huggingface_api_key:
                raise ProviderError(provider.value, "Hugging Face API key is not configured")
            return HuggingFaceProvider(
                api_key=s.huggingface_api_key,
                base_url=s.huggingface_api_base,
                timeout_s=timeout,
                transport=transport,
            )
        if provider is ProviderId.SELF_HOSTED:
            if not s.local_llm_api_base:
                raise ProviderError(provider.value, "Local LLM API base URL is not configured")
            return LocalProvider(
                base_url=s.local_llm_api_base,
                default_model=s.local_llm_model,
                timeout_s=timeout,
                transport=transport,
            )
        raise ProviderError(str(provider), "Unknown provider")
