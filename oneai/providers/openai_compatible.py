# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Chat adapters for vendors that speak the OpenAI chat-completions wire format.

Together, OpenAI, AI/ML API, xAI, DeepSeek and Kimi all accept
``POST {base}/chat/completions`` with a bearer key and return
``choices[0].message.content`` plus a ``usage`` object.
"""

from __future__ import annotations

from typing import Any

from ..models import ChatMessage, ChatResult
from ..settings import settings
from .base import VendorAdapter, normalize_messages


class OpenAICompatibleAdapter(VendorAdapter):
    async def chat(
        self,
        messages: list[dict[str, Any] | ChatMessage],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> ChatResult:
        self._require_key()
        payload_messages = normalize_messages(messages)
        if not payload_messages or all(not m["content"] for m in payload_messages):
            raise ValueError(f"{self.vendor_name} payload requires non-empty messages")

        payload = {
            "model": model,
            "messages": payload_messages,
            "max_tokens": max_tokens or settings.router.max_tokens_default,
            "temperature": (
                temperature if temperature is not None else settings.router.temperature_default
            ),
            "stream": False,
        }

        resp = await self._send(
            "chat",
            "chat",
            self._client.post(
                f"{self.base_url}/chat/completions", json=payload, headers=self._headers()
            ),
        )
        data = self._json(resp, "chat")

        choices = data.get("choices") or []
        if not choices:
            raise self._malformed("chat", "no choices in response")
        content = (choices[0].get("message") or {}).get("content") or ""

        return ChatResult(
            content=content,
            usage=data.get("usage") or {},
            model=data.get("model", model),
            raw=data,
        )


class XAIAdapter(OpenAICompatibleAdapter):
    provider = "xai"
    vendor_name = "xAI"
    env_var = "XAI_API_KEY"
    default_base_url = "https://api.x.ai/v1"


class DeepSeekAdapter(OpenAICompatibleAdapter):
    provider = "deepseek"
    vendor_name = "DeepSeek"
    env_var = "DEEPSEEK_API_KEY"
    default_base_url = "https://api.deepseek.com/v1"


class KimiAdapter(OpenAICompatibleAdapter):
    provider = "kimi"
    vendor_name = "Kimi"
    env_var = "KIMI_API_KEY"
    default_base_url = "https://api.moonshot.cn/v1"
