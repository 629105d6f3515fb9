"""Package specific exception hierarchy."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed taxonomy callers are allowed to branch on."""

    AUTH_FAILED = "auth_failed"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    MODEL_NOT_FOUND = "model_not_found"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"
    # not provider failures
    INVALID_REQUEST = "invalid_request"
    CANCELLED = "cancelled"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.RATE_LIMITED, ErrorKind.UNAVAILABLE)


class ChatGatewayError(Exception):
    """Base exception for chat_gateway package."""


class ProviderError(ChatGatewayError):
    """Represents provider-specific HTTP or API errors."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        suffix = f" (status {status_code})" if status_code is not None else ""
        super().__init__(f"{provider}: {message}{suffix}")
        self.provider = provider
        self.detail = message
        self.status_code = status_code


class InvalidResponseError(ProviderError):
    """Raised when a successful response lacks the expected fields."""


class NormalizedError(ChatGatewayError):
    """The only error shape that crosses the gateway boundary."""

    def __init__(self, kind: ErrorKind, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.provider = provider

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class RequestCancelled(NormalizedError):
    """Raised when a caller-owned cancellation token aborts a call."""

    def __init__(self, message: str = "Request was cancelled.") -> None:
        super().__init__(ErrorKind.CANCELLED, message)


class InvalidRequestError(NormalizedError):
    """Raised for requests rejected before any network call."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.INVALID_REQUEST, message)
