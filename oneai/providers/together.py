# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.

from __future__ import annotations

from ..core.normalizer import as_url_list
from ..models import MediaResult
from ..settings import settings
from .openai_compatible import OpenAICompatibleAdapter


class TogetherAdapter(OpenAICompatibleAdapter):
    """Open models on Together AI: chat and FLUX images."""

    provider = "together"
    vendor_name = "Together"
    env_var = "TOGETHER_API_KEY"
    default_base_url = "https://api.together.xyz/v1"

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
        model = model or settings.router.default_image_model
        payload = {"model": model, "prompt": prompt, "size": size or "1024x1024", "n": n or 1}
        resp = await self._send(
            "image",
            "image generation",
            self._client.post(
                f"{self.base_url}/images/generations", json=payload, headers=self._headers()
            ),
        )
        data = self._json(resp, "image generation")
        # Older deployments answer with a bare ``image_url`` instead of ``data``
        urls = as_url_list(data.get("data")) or as_url_list(data.get("image_url"))
        return MediaResult(urls=urls, model=model, raw=data)
