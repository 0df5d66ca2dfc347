# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

from typing import Any

from ..core.normalizer import as_url_list
from ..models import MediaResult
from .base import VendorAdapter

DEFAULT_SUNO_MODEL = "V3_5"


class SunoAdapter(VendorAdapter):
    """Suno music generation through a bearer-authenticated ``/generate`` endpoint.

    Tracks render asynchronously; the response carries a task id unless the
    deployment answers with finished audio straight away.
    """

    provider = "suno"
    vendor_name = "Suno"
    env_var = "SUNO_API_KEY"
    default_base_url = "https://api.sunoapi.org/api/v1"

    async def generate_music(self, prompt: str, model: str | None = None, **options: Any) -> MediaResult:
        self._require_key()
        model = model if model and model.upper().startswith("V") else DEFAULT_SUNO_MODEL
        style = ", ".join(p for p in (options.get("genre"), options.get("mood")) if p)
        payload = {
            "prompt": prompt,
            "style": style,
            "title": prompt[:50],
            "customMode": bool(style),
            "instrumental": bool(options.get("instrumental", False)),
            "model": model,
        }
        resp = await self._send(
            "music",
            "music generation",
            self._client.post(f"{self.base_url}/generate", json=payload, headers=self._headers()),
        )
        data = self._json(resp, "music generation")
        body = data.get("data") if isinstance(data.get("data"), dict) else {}

        urls = as_url_list(body.get("audio_url") or body.get("audioUrl"))
        task_id = body.get("taskId") or body.get("task_id")
        if not urls and not task_id:
            raise self._malformed("music generation", "no task id or audio in response")
        return MediaResult(
            urls=urls,
            status="completed" if urls else "processing",
            job_id=task_id,
            title=payload["title"],
            model=model,
            metadata={"genre": options.get("genre"), "mood": options.get("mood")},
            raw=data,
        )
