"""
Offline completion provider.

Selected with AI_PROVIDER=mock for local runs without an API key. Replies with a
fixed text when one is given, otherwise with an empty JSON object (JSON mode) or
a small HTML echo of the last user message. Every call is recorded in `calls`.
"""

from __future__ import annotations

import asyncio
import html
from dataclasses import dataclass
from typing import Sequence

from app.ai.types import ChatMessage


@dataclass(frozen=True)
class CompletionCall:
    messages: tuple[ChatMessage, ...]
    json_mode: bool
    max_tokens: int

    @property
    def user_prompt(self) -> str:
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return ""

    @property
    def system_prompt(self) -> str:
        for message in self.messages:
            if message.role == "system":
                return message.content
        return ""


class MockCompletionClient:
    def __init__(self, reply: str | None = None):
        self._reply = reply
        self.calls: list[CompletionCall] = []

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        json_mode: bool = False,
        max_tokens: int = 2000,
    ) -> str:
        await asyncio.sleep(0)
        call = CompletionCall(messages=tuple(messages), json_mode=json_mode, max_tokens=max_tokens)
        self.calls.append(call)
        if self._reply is not None:
            return self._reply
        if json_mode:
            return "{}"
        first_line = next((line.strip() for line in call.user_prompt.splitlines() if line.strip()), "")
        return f"<p>{html.escape(first_line)}</p>"
