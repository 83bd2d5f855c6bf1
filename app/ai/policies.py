"""
Call policies layered over any CompletionClient.

The endpoint layer never retries on its own; these wrappers make timeout and
retry/backoff an explicit, configurable choice (GENERATION_TIMEOUT_S,
GENERATION_RETRIES, GENERATION_RETRY_BACKOFF_S).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from app.ai.types import ChatMessage, CompletionClient, CompletionError

logger = logging.getLogger(__name__)

_NON_RETRYABLE_CODES = {"llm_disabled"}


class TimeoutCompletionClient:
    def __init__(self, inner: CompletionClient, *, timeout_s: float):
        self._inner = inner
        self._timeout_s = timeout_s

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        json_mode: bool = False,
        max_tokens: int = 2000,
    ) -> str:
        try:
            return await asyncio.wait_for(
                self._inner.generate(messages, json_mode=json_mode, max_tokens=max_tokens),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise CompletionError(
                f"Completion timed out after {self._timeout_s:g}s",
                code="llm_timeout",
            ) from exc


class RetryingCompletionClient:
    def __init__(self, inner: CompletionClient, *, retries: int, backoff_s: float = 0.5):
        self._inner = inner
        self._retries = max(0, retries)
        self._backoff_s = max(0.0, backoff_s)

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        json_mode: bool = False,
        max_tokens: int = 2000,
    ) -> str:
        for attempt in range(1, self._retries + 2):
            try:
                return await self._inner.generate(messages, json_mode=json_mode, max_tokens=max_tokens)
            except CompletionError as exc:
                if exc.code in _NON_RETRYABLE_CODES or attempt > self._retries:
                    raise
                logger.warning("completion_retry attempt=%s code=%s: %s", attempt, exc.code, exc)
                await asyncio.sleep(self._backoff_s * attempt)
        raise CompletionError("Completion retries exhausted")  # pragma: no cover


def apply_policies(
    client: CompletionClient,
    *,
    timeout_s: float = 0.0,
    retries: int = 0,
    backoff_s: float = 0.5,
) -> CompletionClient:
    wrapped = client
    if timeout_s and timeout_s > 0:
        wrapped = TimeoutCompletionClient(wrapped, timeout_s=timeout_s)
    if retries > 0:
        wrapped = RetryingCompletionClient(wrapped, retries=retries, backoff_s=backoff_s)
    return wrapped
