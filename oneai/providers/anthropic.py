# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

from typing import Any

from ..models import ChatMessage, ChatResult
from ..settings import settings
from .base import USER_AGENT, VendorAdapter, normalize_messages

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(VendorAdapter):
    provider = "anthropic"
    vendor_name = "Anthropic"
    env_var = "ANTHROPIC_API_KEY"
    default_base_url = "https://api.anthropic.com"

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._require_key(),
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
            "User-Agent": f"{USER_AGENT} (Anthropic)",
        }

    async def chat(
        self,
        messages: list[dict[str, Any] | ChatMessage],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> ChatResult:
        self._require_key()
        # Anthropic takes system prompts as a top-level field
        system_parts = []
        turns = []
        for m in normalize_messages(messages):
            if m["role"] == "system":
                system_parts.append(m["content"])
            else:
                turns.append({"role": m["role"], "content": [{"type": "text", "text": m["content"]}]})

        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens or settings.router.max_tokens_default,
            "temperature": (
                temperature if temperature is not None else settings.router.temperature_default
            ),
            "messages": turns,
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)

        resp = await self._send(
            "chat",
            "chat",
            self._client.post(f"{self.base_url}/v1/messages", json=payload, headers=self._headers()),
        )
        data = self._json(resp, "chat")

        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise self._malformed("chat", "no content blocks in response")
        text = "".join(b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text")

        return ChatResult(content=text, usage=data.get("usage") or {}, model=data.get("model", model), raw=data)
