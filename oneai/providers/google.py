# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

from typing import Any

from ..models import ChatMessage, ChatResult
from ..settings import settings
from .base import USER_AGENT, VendorAdapter, normalize_messages


class GoogleAdapter(VendorAdapter):
    """Gemini chat via ``generateContent``. The key travels as a query parameter."""

    provider = "google"
    vendor_name = "Google"
    env_var = "GOOGLE_API_KEY"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "User-Agent": f"{USER_AGENT} (Google)"}

    def _convert_messages_to_google_format(
        self, messages: list[dict[str, Any] | ChatMessage]
    ) -> dict[str, Any]:
        """Convert OpenAI format messages to Gemini ``contents``.

        Google uses ``model`` instead of ``assistant`` and takes system text
        as a separate ``systemInstruction``.
        """
        contents = []
        system_instruction = None
        for m in normalize_messages(messages):
            if m["role"] == "system":
                system_instruction = m["content"]
            elif m["role"] == "assistant":
                contents.append({"role": "model", "parts": [{"text": m["content"]}]})
            else:
                contents.append({"role": "user", "parts": [{"text": m["content"]}]})

        result: dict[str, Any] = {"contents": contents}
        if system_instruction:
            result["systemInstruction"] = {"role": "system", "parts": [{"text": system_instruction}]}
        return result

    async def chat(
        self,
        messages: list[dict[str, Any] | ChatMessage],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> ChatResult:
        key = self._require_key()
        # Namespaced hints such as google/gemini-1.5-pro
        model_id = model.split("/", 1)[1] if model.startswith("google/") else model

        payload = self._convert_messages_to_google_format(messages)
        payload["generationConfig"] = {
            "maxOutputTokens": max_tokens or settings.router.max_tokens_default,
            "temperature": (
                temperature if temperature is not None else settings.router.temperature_default
            ),
        }

        resp = await self._send(
            "chat",
            "chat",
            self._client.post(
                f"{self.base_url}/models/{model_id}:generateContent",
                params={"key": key},
                json=payload,
                headers=self._headers(),
            ),
        )
        data = self._json(resp, "chat")

        candidates = data.get("candidates") or []
        if not candidates:
            raise self._malformed("chat", "no candidates in response")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = parts[0].get("text", "") if parts else ""

        usage_metadata = data.get("usageMetadata") or {}
        usage = {
            "prompt_tokens": usage_metadata.get("promptTokenCount", 0),
            "completion_tokens": usage_metadata.get("candidatesTokenCount", 0),
        }
        return ChatResult(content=text, usage=usage, model=model_id, raw=data)
