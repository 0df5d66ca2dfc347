# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

import random
from typing import Any

from ..core.normalizer import as_url_list
from ..models import MediaResult
from ..settings import settings
from .openai_compatible import OpenAICompatibleAdapter

_PENDING_STATUSES = ("processing", "pending", "queued")


class AIMLAdapter(OpenAICompatibleAdapter):
    """AI/ML API: premium chat models and Runway text-to-video."""

    provider = "aimlapi"
    vendor_name = "AI/ML API"
    env_var = "AIML_API_KEY"
    default_base_url = "https://api.aimlapi.com/v1"

    async def generate_video(self, prompt: str, model: str | None = None, **options: Any) -> MediaResult:
        self._require_key()
        model = model or settings.router.default_video_model
        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt.strip(),
            "duration": options.get("duration") or 5,
            "ratio": options.get("aspect_ratio") or "16:9",
            "seed": options.get("seed", random.randint(0, 999_999)),
            "watermark": False,
        }
        if options.get("image_url"):
            payload["image_url"] = options["image_url"]

        resp = await self._send(
            "video",
            "video generation",
            self._client.post(
                f"{self.base_url}/video/generations", json=payload, headers=self._headers()
            ),
        )
        data = self._json(resp, "video generation")
        nested = data.get("data") if isinstance(data.get("data"), dict) else {}

        metadata = {"duration": payload["duration"], "input_image_provided": "image_url" in payload}
        if data.get("status") in _PENDING_STATUSES:
            return MediaResult(
                status="processing",
                job_id=data.get("id"),
                thumbnail_url=data.get("thumbnail_url") or nested.get("thumbnail_url"),
                model=model,
                metadata=metadata,
                raw=data,
            )

        urls = as_url_list(data.get("url") or data.get("video_url") or nested.get("url"))
        return MediaResult(
            urls=urls,
            status="completed" if urls else data.get("status"),
            job_id=data.get("id"),
            thumbnail_url=data.get("thumbnail_url") or nested.get("thumbnail_url"),
            model=model,
            metadata=metadata,
            raw=data,
        )
