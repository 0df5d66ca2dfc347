# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Base class for vendor adapters.

Every adapter wraps exactly one vendor API. It receives its credential at
construction, performs one upstream call per operation and never retries:
non-2xx responses and malformed bodies raise ``VendorError``, an exceeded
per-call timeout raises ``AdapterTimeoutError`` and a missing credential
raises ``ConfigurationError`` before any network I/O.
"""

from __future__ import annotations

import base64
import time
from abc import ABC
from collections.abc import Awaitable
from typing import Any

import httpx
import structlog

from ..core.exceptions import AdapterTimeoutError, ConfigurationError, VendorError
from ..models import ChatMessage, ChatResult, MediaResult
from ..settings import settings
from ..telemetry.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS
from ..telemetry.tracing import start_span_async

logger = structlog.get_logger(__name__)

USER_AGENT = "OneAI/1.0.0"

# Vendor bodies are logged, trimmed, but only the status reaches callers
_LOGGED_BODY_LIMIT = 500


def normalize_messages(messages: list[dict[str, Any] | ChatMessage]) -> list[dict[str, str]]:
    """Normalize messages to ``{role, content}`` dicts, accepting dicts or ChatMessage objects."""
    norm = []
    for m in messages:
        if isinstance(m, ChatMessage):
            norm.append({"role": m.role, "content": m.content})
        elif isinstance(m, dict):
            norm.append({"role": m.get("role", "user"), "content": m.get("content", "")})
    return norm


def audio_data_uri(audio: bytes, mime_type: str = "audio/mpeg") -> str:
    """Wrap raw audio bytes so they can travel in ``audio_url``."""
    return f"data:{mime_type};base64,{base64.b64encode(audio).decode('ascii')}"


class VendorAdapter(ABC):
    """Common plumbing for all vendor adapters.

    Subclasses set ``provider`` (registry id), ``vendor_name`` (used in error
    messages), ``env_var`` and ``default_base_url``, and override the
    operations their vendor supports.
    """

    provider: str = ""
    vendor_name: str = ""
    env_var: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout_s: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = str(base_url or self.default_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.adapters.timeout_ms / 1000
        self._client = client or httpx.AsyncClient(timeout=self.timeout_s)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                f"{self.vendor_name} is not configured: set {self.env_var}",
                config_key=self.env_var,
            )
        return self.api_key

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._require_key()}",
            "Content-Type": "application/json",
            "User-Agent": f"{USER_AGENT} ({self.vendor_name})",
        }

    async def _send(self, task: str, action: str, call: Awaitable[httpx.Response]) -> httpx.Response:
        """Await one vendor call, mapping transport failures and non-2xx statuses."""
        start = time.perf_counter()
        outcome = "error"
        async with start_span_async("provider.invoke", provider=self.provider, task=task, action=action):
            try:
                try:
                    resp = await call
                except httpx.TimeoutException as e:
                    outcome = "timeout"
                    raise AdapterTimeoutError(
                        f"{self.vendor_name} {action} timed out after {self.timeout_s:g}s",
                        provider=self.provider,
                        timeout_s=self.timeout_s,
                    ) from e
                except httpx.HTTPError as e:
                    raise VendorError(
                        f"{self.vendor_name} {action} failed: {e.__class__.__name__}",
                        provider=self.provider,
                    ) from e

                if not resp.is_success:
                    logger.warning(
                        "vendor_error",
                        provider=self.provider,
                        action=action,
                        status=resp.status_code,
                        body=resp.text[:_LOGGED_BODY_LIMIT],
                    )
                    raise VendorError(
                        f"{self.vendor_name} {action} failed: {resp.status_code} {resp.text}",
                        provider=self.provider,
                        status_code=resp.status_code,
                    )
                outcome = "success"
                return resp
            finally:
                PROVIDER_REQUESTS.labels(provider=self.provider, task=task, outcome=outcome).inc()
                PROVIDER_LATENCY.labels(provider=self.provider, task=task).observe(
                    time.perf_counter() - start
                )

    def _json(self, resp: httpx.Response, action: str) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise VendorError(
                f"{self.vendor_name} {action} failed: {resp.status_code} malformed body",
                provider=self.provider,
                status_code=resp.status_code,
            ) from e
        if not isinstance(data, dict):
            raise VendorError(
                f"{self.vendor_name} {action} failed: {resp.status_code} unexpected body",
                provider=self.provider,
                status_code=resp.status_code,
            )
        return data

    def _malformed(self, action: str, reason: str) -> VendorError:
        return VendorError(f"{self.vendor_name} {action} failed: {reason}", provider=self.provider)

    # Operations. Adapters override the ones their vendor offers.

    async def chat(
        self,
        messages: list[dict[str, Any] | ChatMessage],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> ChatResult:
        raise NotImplementedError(f"{self.vendor_name} does not support chat")

    async def generate_image(
        self,
        prompt: str,
        model: str | None = None,
        size: str | None = None,
        style: str | None = None,
        quality: str | None = None,
        n: int | None = None,
    ) -> MediaResult:
        raise NotImplementedError(f"{self.vendor_name} does not support image generation")

    async def generate_video(self, prompt: str, model: str | None = None, **options: Any) -> MediaResult:
        raise NotImplementedError(f"{self.vendor_name} does not support video generation")

    async def synthesize_speech(
        self, text: str, voice: str | None = None, model: str | None = None
    ) -> MediaResult:
        raise NotImplementedError(f"{self.vendor_name} does not support text-to-speech")

    async def transcribe(
        self, audio: bytes, filename: str = "audio.webm", language: str | None = None, model: str | None = None
    ) -> MediaResult:
        raise NotImplementedError(f"{self.vendor_name} does not support transcription")

    async def generate_music(self, prompt: str, model: str | None = None, **options: Any) -> MediaResult:
        raise NotImplementedError(f"{self.vendor_name} does not support music generation")

    async def aclose(self) -> None:
        """Close the HTTP client to prevent connection leaks."""
        await self._client.aclose()
