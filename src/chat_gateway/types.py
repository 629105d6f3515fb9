"""Provider-agnostic request/response models."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, model_validator


class ProviderId(str, Enum):
    """Closed set of backends the gateway can dispatch to."""

    HOSTED_COMMERCIAL = "hosted-commercial"
    HOSTED_OPEN = "hosted-open"
    SELF_HOSTED = "self-hosted"


PROVIDER_ORDER: tuple[ProviderId, ...] = (
    ProviderId.HOSTED_COMMERCIAL,
    ProviderId.HOSTED_OPEN,
    ProviderId.SELF_HOSTED,
)

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str


class ModelDescriptor(BaseModel):
    """A selectable model as reported by the catalog."""

    id: str
    name: str
    provider: ProviderId


class ChatRequest(BaseModel):
    """Normalized request addressed either to a provider or to a model id."""

    model_config = {"protected_namespaces": ()}

    messages: list[Message]
    provider: ProviderId | None = None
    model_id: str | None = None

    @model_validator(mode="after")
    def _one_addressing_mode(self) -> ChatRequest:
        if (self.provider is None) == (self.model_id is None):
            raise ValueError("exactly one of 'provider' or 'model_id' must be set")
        return self


class ChatResult(BaseModel):
    """Single normalized reply."""

    message: str
    provider: ProviderId
    # model actually requested from the backend, if any
    model: str | None = None
