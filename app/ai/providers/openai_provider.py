from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from app.ai.config import AIConfig
from app.ai.types import ChatMessage, CompletionError

logger = logging.getLogger(__name__)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo", "default_key"}


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 0,
        temperature: float | None = None,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or "").strip()
        # No client without a usable key; generate() raises llm_disabled.
        self._client: AsyncOpenAI | None = None
        if key and not _looks_like_placeholder(key):
            self._client = AsyncOpenAI(
                api_key=key,
                base_url=base_url or None,
                timeout=timeout_s,
                max_retries=max_retries,
            )

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        json_mode: bool = False,
        max_tokens: int = 2000,
    ) -> str:
        if self._client is None:
            raise CompletionError("OPENAI_API_KEY is missing", code="llm_disabled")

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": max_tokens,
        }
        if self._temperature is not None:
            create_kwargs["temperature"] = self._temperature
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except OpenAIError as exc:
            logger.warning("openai_completion_failed model=%s json_mode=%s: %s", self._model, json_mode, exc)
            raise CompletionError(str(exc) or exc.__class__.__name__, code="llm_request_failed") from exc

        content = response.choices[0].message.content if response.choices else ""
        return content or ""


def from_config(cfg: AIConfig) -> OpenAIProvider:
    return OpenAIProvider(
        model=cfg.model,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        timeout_s=cfg.timeout_s,
        max_retries=cfg.max_retries,
    )
