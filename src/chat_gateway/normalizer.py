"""Map raw transport/provider failures onto the closed error taxonomy."""

from __future__ import annotations

import json
import logging

import httpx

from chat_gateway.errors import ErrorKind, InvalidResponseError, NormalizedError, ProviderError

logger = logging.getLogger(__name__)

_AUTH_SIGNATURES = ("api key", "unauthorized", "authentication", "forbidden")
_RATE_LIMIT_SIGNATURES = ("rate limit", "too many requests")
_MODEL_NOT_FOUND_SIGNATURES = ("model not found",)

_MESSAGES = {
    ErrorKind.AUTH_FAILED: "AI service authentication failed",
    ErrorKind.RATE_LIMITED: "AI service rate limit exceeded",
    ErrorKind.UNAVAILABLE: "AI service is temporarily unavailable",
    ErrorKind.MODEL_NOT_FOUND: "Requested AI model not found",
    ErrorKind.INVALID_RESPONSE: "AI service returned an invalid response",
    ErrorKind.UNKNOWN: "AI service error occurred",
}


def normalize(exc: BaseException, provider: str | None = None) -> NormalizedError:
    """Classify ``exc``; the first matching rule wins."""
    if isinstance(exc, NormalizedError):
        return exc

    if isinstance(exc, ProviderError):
        provider = provider or exc.provider
    kind = _classify(exc)
    if kind is ErrorKind.UNKNOWN:
        logger.error("Unclassified provider failure (%s): %r", provider, exc)

    detail = str(exc) or type(exc).__name__
    return NormalizedError(kind, f"{_MESSAGES[kind]}: {detail}", provider=provider)


def _classify(exc: BaseException) -> ErrorKind:
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return ErrorKind.UNAVAILABLE
    # message embeds the raw body, so no signature matching
    if isinstance(exc, InvalidResponseError):
        return ErrorKind.INVALID_RESPONSE

    status = exc.status_code if isinstance(exc, ProviderError) else None
    text = str(exc).lower()

    if status in (401, 403) or _matches(text, _AUTH_SIGNATURES):
        return ErrorKind.AUTH_FAILED
    if status == 429 or _matches(text, _RATE_LIMIT_SIGNATURES):
        return ErrorKind.RATE_LIMITED
    if status == 404 or _matches(text, _MODEL_NOT_FOUND_SIGNATURES):
        return ErrorKind.MODEL_NOT_FOUND
    if status is not None and status >= 500:
        return ErrorKind.UNAVAILABLE
    if isinstance(exc, (json.JSONDecodeError, KeyError, TypeError)):
        return ErrorKind.INVALID_RESPONSE
    return ErrorKind.UNKNOWN


def _matches(text: str, signatures: tuple[str, ...]) -> bool:
    return any(sig in text for sig in signatures)
