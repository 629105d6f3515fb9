"""Client-side retry with exponential backoff and per-turn supersession."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from chat_gateway.cancellation import CancellationToken
from chat_gateway.dispatcher import ChatDispatcher
from chat_gateway.errors import NormalizedError, RequestCancelled
from chat_gateway.types import ChatRequest, ChatResult, ModelDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TURN = "default"


class RetryController:
    """Wraps ``ChatDispatcher.send`` for interactive callers.

    Each call to ``send`` starts a new logical turn keyed by ``turn``; a
    still-pending call for the same key is cancelled first, so at most one
    outbound request per turn is ever in flight.
    """

    def __init__(
        self,
        dispatcher: ChatDispatcher,
        *,
        max_attempts: int = 3,
        base_delay_s: float = 1.0,
        max_delay_s: float = 8.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._dispatcher = dispatcher
        self._max_attempts = max_attempts
        self._base_delay_s = base_delay_s
        self._max_delay_s = max_delay_s
        self._sleep = sleep
        self._pending: dict[str, CancellationToken] = {}

    def backoff(self, attempt: int) -> float:
        """Delay to wait after the given (1-based) failed attempt."""
        return min(self._base_delay_s * 2 ** (attempt - 1), self._max_delay_s)

    def begin_turn(self, turn: str = DEFAULT_TURN) -> CancellationToken:
        """Cancel whatever is pending for ``turn`` and issue a fresh token."""
        previous = self._pending.get(turn)
        if previous is not None:
            logger.info("Superseding pending request for turn %r", turn)
            previous.cancel()
        token = CancellationToken()
        self._pending[turn] = token
        return token

    def cancel(self, turn: str = DEFAULT_TURN) -> None:
        token = self._pending.pop(turn, None)
        if token is not None:
            token.cancel()

    async def send(
        self,
        request: ChatRequest,
        *,
        turn: str = DEFAULT_TURN,
        known_models: Sequence[ModelDescriptor] | None = None,
    ) -> ChatResult:
        token = self.begin_turn(turn)
        try:
            return await self._attempt_loop(request, token, known_models)
        finally:
            if self._pending.get(turn) is token:
                del self._pending[turn]

    async def _attempt_loop(
        self,
        request: ChatRequest,
        token: CancellationToken,
        known_models: Sequence[ModelDescriptor] | None,
    ) -> ChatResult:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._dispatcher.send(
                    request, cancel_token=token, known_models=known_models
                )
            except RequestCancelled:
                raise
            except NormalizedError as exc:
                if not exc.retryable or attempt == self._max_attempts:
                    raise
                delay = self.backoff(attempt)
                logger.warning(
                    "Attempt %d/%d failed (%s); retrying in %.1fs",
                    attempt,
                    self._max_attempts,
                    exc.kind.value,
                    delay,
                )
                await token.guard(self._sleep(delay))
