# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Replicate adapter for hosted image and music models.

Replicate runs predictions asynchronously: one create call followed by
status checks until the prediction settles. The status checks are the only
repeated requests any adapter makes; a failed prediction is never re-run.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from ..core.exceptions import AdapterTimeoutError, VendorError
from ..core.normalizer import as_url_list
from ..models import MediaResult
from ..settings import settings
from .base import USER_AGENT, VendorAdapter

_TERMINAL_STATUSES = ("succeeded", "failed", "canceled")


def _parse_size(size: str | None) -> dict[str, int]:
    if not size or "x" not in size:
        return {}
    width, _, height = size.partition("x")
    if not (width.isdigit() and height.isdigit()):
        return {}
    return {"width": int(width), "height": int(height)}


class ReplicateAdapter(VendorAdapter):
    provider = "replicate"
    vendor_name = "Replicate"
    env_var = "REPLICATE_API_TOKEN"
    default_base_url = "https://api.replicate.com/v1"

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout_s: float | None = None,
        client: httpx.AsyncClient | None = None,
        poll_interval_s: float | None = None,
        max_polls: int | None = None,
    ) -> None:
        super().__init__(api_key, base_url=base_url, timeout_s=timeout_s, client=client)
        self.poll_interval_s = (
            poll_interval_s
            if poll_interval_s is not None
            else settings.adapters.replicate_poll_interval_ms / 1000
        )
        self.max_polls = max_polls or settings.adapters.replicate_max_polls

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Token {self._require_key()}",
            "Content-Type": "application/json",
            "User-Agent": f"{USER_AGENT} (Replicate)",
        }

    async def _predict(self, task: str, action: str, model: str, inputs: dict[str, Any]) -> dict[str, Any]:
        """Create a prediction and wait for it to settle.

        ``owner/name:version`` pins a version; a bare ``owner/name`` runs the
        model's latest version.
        """
        if ":" in model:
            url = f"{self.base_url}/predictions"
            body: dict[str, Any] = {"version": model.split(":", 1)[1], "input": inputs}
        else:
            url = f"{self.base_url}/models/{model}/predictions"
            body = {"input": inputs}

        resp = await self._send(task, action, self._client.post(url, json=body, headers=self._headers()))
        prediction = self._json(resp, action)
        if not prediction.get("id"):
            raise self._malformed(action, "prediction without id")

        polls = 0
        while prediction.get("status") not in _TERMINAL_STATUSES:
            if polls >= self.max_polls:
                raise AdapterTimeoutError(
                    f"Replicate {action} timed out after {self.max_polls} status checks",
                    provider=self.provider,
                    timeout_s=self.max_polls * self.poll_interval_s,
                )
            await asyncio.sleep(self.poll_interval_s)
            polls += 1
            status_url = (prediction.get("urls") or {}).get("get") or (
                f"{self.base_url}/predictions/{prediction['id']}"
            )
            resp = await self._send(task, action, self._client.get(status_url, headers=self._headers()))
            prediction = self._json(resp, action)

        if prediction["status"] != "succeeded":
            raise VendorError(
                f"Replicate {action} failed: prediction {prediction['status']}",
                provider=self.provider,
                details={"prediction_error": prediction.get("error")},
            )
        return prediction

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
        model = model or settings.router.default_replicate_image_model
        inputs: dict[str, Any] = {"prompt": prompt, "num_outputs": n or 1, **_parse_size(size)}
        prediction = await self._predict("image", "image generation", model, inputs)
        return MediaResult(
            urls=as_url_list(prediction.get("output")),
            model=model,
            job_id=prediction["id"],
            raw=prediction,
        )

    async def generate_music(self, prompt: str, model: str | None = None, **options: Any) -> MediaResult:
        self._require_key()
        model = model or settings.router.default_replicate_music_model
        style = " ".join(p for p in (options.get("genre"), options.get("mood")) if p)
        inputs = {
            "prompt": f"{style}: {prompt}" if style else prompt,
            "duration": options.get("duration") or 30,
            "output_format": "mp3",
        }
        prediction = await self._predict("music", "music generation", model, inputs)
        return MediaResult(
            urls=as_url_list(prediction.get("output")),
            model=model,
            job_id=prediction["id"],
            title=prompt[:50],
            metadata={"duration": inputs["duration"]},
            raw=prediction,
        )
