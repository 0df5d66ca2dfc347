# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

from ..models import MediaResult
from ..settings import settings
from .base import USER_AGENT, VendorAdapter, audio_data_uri

DEFAULT_TTS_MODEL = "eleven_monolingual_v1"

VOICE_SETTINGS = {"stability": 0.1, "similarity_boost": 0.3, "style": 0.2}


class ElevenLabsAdapter(VendorAdapter):
    """ElevenLabs streaming text-to-speech. Audio comes back as raw bytes."""

    provider = "elevenlabs"
    vendor_name = "ElevenLabs"
    env_var = "ELEVENLABS_API_KEY"
    default_base_url = "https://api.elevenlabs.io/v1"

    def _headers(self) -> dict[str, str]:
        return {
            "xi-api-key": self._require_key(),
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
            "User-Agent": f"{USER_AGENT} (ElevenLabs)",
        }

    async def synthesize_speech(
        self, text: str, voice: str | None = None, model: str | None = None
    ) -> MediaResult:
        self._require_key()
        voice_id = voice or settings.router.default_elevenlabs_voice
        model = model or DEFAULT_TTS_MODEL
        payload = {"text": text, "model_id": model, "voice_settings": VOICE_SETTINGS}
        resp = await self._send(
            "audio",
            "speech",
            self._client.post(
                f"{self.base_url}/text-to-speech/{voice_id}/stream",
                json=payload,
                headers=self._headers(),
            ),
        )
        mime_type = resp.headers.get("content-type", "audio/mpeg").split(";")[0]
        return MediaResult(
            urls=[audio_data_uri(resp.content, mime_type)] if resp.content else [],
            model=model,
            metadata={"voice": voice_id, "bytes": len(resp.content)},
        )
