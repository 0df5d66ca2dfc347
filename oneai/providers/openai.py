# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

from ..core.normalizer import as_url_list
from ..models import MediaResult
from .base import USER_AGENT, audio_data_uri
from .openai_compatible import OpenAICompatibleAdapter


class OpenAIAdapter(OpenAICompatibleAdapter):
    """GPT chat, DALL-E images, Whisper transcription and TTS speech."""

    provider = "openai"
    vendor_name = "OpenAI"
    env_var = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"

    async def generate_image(
        self,
        prompt: str,
        model: str | None = None,
        size: str | None = None,
        style: str | None = None,
        quality: str | None = None,
        n: int | None = None,
    ) -> MediaResult:
        self._require_key()
        model = model or "dall-e-3"
        payload = {
            "model": model,
            "prompt": prompt,
            "n": n or 1,
            "size": size or "1024x1024",
            "style": style or "vivid",
            "quality": quality or "standard",
        }
        resp = await self._send(
            "image",
            "image generation",
            self._client.post(
                f"{self.base_url}/images/generations", json=payload, headers=self._headers()
            ),
        )
        data = self._json(resp, "image generation")
        revised = [d.get("revised_prompt") for d in data.get("data") or [] if isinstance(d, dict)]
        return MediaResult(
            urls=as_url_list(data.get("data")),
            model=model,
            metadata={"revised_prompt": revised[0]} if revised and revised[0] else {},
            raw=data,
        )

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        language: str | None = None,
        model: str | None = None,
    ) -> MediaResult:
        self._require_key()
        model = model or "whisper-1"
        form = {"model": model, "language": language or "en"}
        # multipart: no JSON content type
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "User-Agent": f"{USER_AGENT} ({self.vendor_name})",
        }
        resp = await self._send(
            "transcription",
            "transcription",
            self._client.post(
                f"{self.base_url}/audio/transcriptions",
                data=form,
                files={"file": (filename, audio)},
                headers=headers,
            ),
        )
        data = self._json(resp, "transcription")
        return MediaResult(
            content=data.get("text") or "",
            model=model,
            metadata={"language": form["language"], "confidence": 0.95},
            raw=data,
        )

    async def synthesize_speech(
        self, text: str, voice: str | None = None, model: str | None = None
    ) -> MediaResult:
        self._require_key()
        model = model or "tts-1"
        payload = {"model": model, "input": text, "voice": voice or "alloy"}
        resp = await self._send(
            "audio",
            "speech",
            self._client.post(f"{self.base_url}/audio/speech", json=payload, headers=self._headers()),
        )
        return MediaResult(
            urls=[audio_data_uri(resp.content)] if resp.content else [],
            model=model,
            metadata={"voice": payload["voice"]},
        )
