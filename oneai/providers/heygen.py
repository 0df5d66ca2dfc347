# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
HeyGen adapter: talking avatar videos, their status, and the voice/avatar
catalog used to pick them.
"""

from __future__ import annotations

from typing import Any

from ..models import MediaResult
from .base import USER_AGENT, VendorAdapter

DEFAULT_AVATAR_ID = "Kristin_public_3_20240108"
DEFAULT_VOICE_ID = "1bd001e7e50f421d891986aad5158bc8"

_STATUS_MAP = {
    "completed": "completed",
    "processing": "processing",
    "pending": "processing",
    "failed": "failed",
    "error": "failed",
}


def map_video_status(status: str | None) -> str:
    """HeyGen job status to ours; unknown values count as still processing."""
    return _STATUS_MAP.get(status or "", "processing")


def _entries(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    # Listing endpoints return either ``data: [...]`` or ``data: {key: [...]}``
    payload = data.get("data")
    if isinstance(payload, dict):
        payload = payload.get(key)
    return [e for e in payload if isinstance(e, dict)] if isinstance(payload, list) else []


class HeyGenAdapter(VendorAdapter):
    provider = "heygen"
    vendor_name = "HeyGen"
    env_var = "HEYGEN_API_KEY"
    default_base_url = "https://api.heygen.com"

    def _headers(self) -> dict[str, str]:
        return {
            "X-API-KEY": self._require_key(),
            "Content-Type": "application/json",
            "User-Agent": f"{USER_AGENT} (HeyGen)",
        }

    async def generate_video(self, prompt: str, model: str | None = None, **options: Any) -> MediaResult:
        """Submit a talking avatar video that reads ``prompt`` aloud.

        HeyGen renders asynchronously, so the result is a ``processing`` job
        to be followed with :meth:`video_status`.
        """
        self._require_key()
        avatar_id = options.get("avatar_id") or DEFAULT_AVATAR_ID
        voice_id = options.get("voice") or DEFAULT_VOICE_ID
        payload = {
            "video_inputs": [
                {
                    "character": {"type": "avatar", "avatar_id": avatar_id, "scale": 1.0},
                    "voice": {
                        "type": "text",
                        "input_text": prompt.strip(),
                        "voice_id": voice_id,
                        "speed": 1.0,
                    },
                }
            ],
            "dimension": {"width": 1280, "height": 720},
            "aspect_ratio": options.get("aspect_ratio") or "16:9",
            "test": False,
            "caption": False,
        }
        resp = await self._send(
            "video",
            "video generation",
            self._client.post(f"{self.base_url}/v2/video/generate", json=payload, headers=self._headers()),
        )
        data = self._json(resp, "video generation")
        video_id = (data.get("data") or {}).get("video_id")
        if not video_id:
            raise self._malformed("video generation", "no video_id in response")
        return MediaResult(
            status="processing",
            job_id=video_id,
            model="heygen",
            metadata={"avatar_id": avatar_id, "voice_id": voice_id},
            raw=data,
        )

    async def video_status(self, video_id: str) -> dict[str, Any]:
        resp = await self._send(
            "video",
            "video status",
            self._client.get(
                f"{self.base_url}/v1/video_status.get",
                params={"video_id": video_id},
                headers=self._headers(),
            ),
        )
        data = self._json(resp, "video status").get("data") or {}
        status = map_video_status(data.get("status"))
        completed = status == "completed"
        return {
            "video_id": video_id,
            "status": status,
            "video_url": data.get("video_url") if completed else None,
            "thumbnail_url": data.get("thumbnail_url") if completed else None,
            "progress": data.get("progress") or 0,
            "error_message": data.get("error_message") if status == "failed" else None,
        }

    async def list_voices(self) -> list[dict[str, Any]]:
        resp = await self._send(
            "video", "voice listing", self._client.get(f"{self.base_url}/v2/voices", headers=self._headers())
        )
        return _entries(self._json(resp, "voice listing"), "voices")

    async def list_avatars(self) -> list[dict[str, Any]]:
        resp = await self._send(
            "video", "avatar listing", self._client.get(f"{self.base_url}/v2/avatars", headers=self._headers())
        )
        return _entries(self._json(resp, "avatar listing"), "avatars")
