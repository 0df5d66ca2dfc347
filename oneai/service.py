# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Capability service.

Runs one request through ``validate -> route -> adapter call -> normalize or
degrade`` and always hands back a ``CanonicalResponse``. Only
``ValidationError`` escapes, and only before any routing happens. Adapter
``ConfigurationError``/``VendorError`` are handled here; anything else is
logged and reported as a generic internal failure.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from .core.credentials import CredentialSnapshot, resolve_credentials
from .core.degradation import ADAPTER_ERROR, EMPTY_OUTPUT, MISSING_CREDENTIAL, degraded_response, degrades
from .core.exceptions import ConfigurationError, InternalError, ValidationError, VendorError
from .core.fanout import gather_with_defaults
from .core.normalizer import (
    chat_failure,
    has_content,
    image_failure,
    internal_failure,
    normalize_chat,
    normalize_media,
)
from .models import CanonicalResponse, CapabilityRequest, ChatMessage, ChatResult, MediaResult, Task
from .providers.base import VendorAdapter
from .providers.registry import PROVIDERS, create_adapter, get_descriptor
from .routing.router import CapabilityRouter, Candidate, RouteDecision
from .settings import settings
from .telemetry.metrics import COST_TOTAL_USD, ROUTER_FALLBACKS, TOKENS_TOTAL
from .telemetry.tracing import start_span_async

logger = structlog.get_logger(__name__)

MAX_IMAGE_PROMPT_CHARS = 4000
CATALOG_LIMIT = 10

# Chat model used when routing came from the default chain
_CHAIN_CHAT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-20241022",
    "google": "gemini-1.5-flash",
    "xai": "grok-beta",
    "deepseek": "deepseek-chat",
    "kimi": "moonshot-v1-8k",
}

AdapterFactory = Callable[[str, CredentialSnapshot], VendorAdapter]


def _require_text(payload: dict[str, Any], field: str, label: str) -> str:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required", field=field)
    return value


def validate_request(request: CapabilityRequest) -> None:
    """Reject requests missing their task's required field, before any routing."""
    payload = request.payload
    if request.task == Task.CHAT:
        messages = payload.get("messages")
        if not isinstance(messages, list) or not messages:
            raise ValidationError("Messages are required", field="messages")
        try:
            parsed = [m if isinstance(m, ChatMessage) else ChatMessage.model_validate(m) for m in messages]
        except PydanticValidationError as e:
            raise ValidationError("Each message needs a role and content", field="messages") from e
        if not any(m.content.strip() for m in parsed):
            raise ValidationError("Messages must contain text", field="messages")
    elif request.task == Task.IMAGE:
        prompt = _require_text(payload, "prompt", "Prompt")
        if len(prompt) > MAX_IMAGE_PROMPT_CHARS:
            raise ValidationError(
                f"Prompt is too long. Maximum {MAX_IMAGE_PROMPT_CHARS} characters allowed.", field="prompt"
            )
    elif request.task in (Task.VIDEO, Task.MUSIC):
        _require_text(payload, "prompt", "Prompt")
    elif request.task == Task.AUDIO:
        _require_text(payload, "text", "Text")
    elif request.task == Task.TRANSCRIPTION:
        if not payload.get("audio"):
            raise ValidationError("Audio file is required", field="audio")


class CapabilityService:
    """Entry point for every capability request.

    ``credentials_provider`` and ``adapter_factory`` default to the real
    environment and registry; tests inject fakes.
    """

    def __init__(
        self,
        router: CapabilityRouter | None = None,
        credentials_provider: Callable[[], CredentialSnapshot] = resolve_credentials,
        adapter_factory: AdapterFactory = create_adapter,
    ) -> None:
        self.router = router or CapabilityRouter()
        self.credentials_provider = credentials_provider
        self.adapter_factory = adapter_factory

    async def handle(self, request: CapabilityRequest) -> CanonicalResponse:
        validate_request(request)
        try:
            async with start_span_async("capability.handle", task=request.task.value):
                return await self._handle(request)
        except Exception as e:
            error = InternalError(
                f"Unhandled {type(e).__name__} in {request.task.value} request",
                details={"task": request.task.value, "error_type": type(e).__name__},
            )
            logger.exception(
                "capability_internal_error",
                task=request.task.value,
                error_code=error.error_code,
                error=error.message,
            )
            return internal_failure(request.task, error)

    async def _handle(self, request: CapabilityRequest) -> CanonicalResponse:
        credentials = self.credentials_provider()
        decision = self.router.route(request.task, request.model_hint, credentials)

        attempts: tuple[Candidate, ...] = (decision.selected,)
        if request.task == Task.CHAT and settings.router.chat_failover_enabled:
            attempts += decision.failover_candidates()

        reason = MISSING_CREDENTIAL
        for index, candidate in enumerate(attempts):
            if index:
                logger.info("chat_failover", task=request.task.value, provider=candidate.provider_id)
            adapter = self.adapter_factory(candidate.provider_id, credentials)
            try:
                result = await self._invoke(adapter, request, decision, candidate)
            except ConfigurationError as e:
                reason = MISSING_CREDENTIAL
                logger.warning("adapter_not_configured", provider=candidate.provider_id, config_key=e.config_key)
                ROUTER_FALLBACKS.labels(provider=candidate.provider_id, reason=reason).inc()
                continue
            except VendorError as e:
                reason = ADAPTER_ERROR
                # Vendor text stays in the server log
                logger.warning(
                    "adapter_failed",
                    provider=candidate.provider_id,
                    task=request.task.value,
                    error_code=e.error_code,
                    status_code=e.status_code,
                    error=e.message,
                )
                ROUTER_FALLBACKS.labels(provider=candidate.provider_id, reason=reason).inc()
                continue
            finally:
                await adapter.aclose()

            if not has_content(request.task, result):
                reason = EMPTY_OUTPUT
                logger.warning("adapter_empty_output", provider=candidate.provider_id, task=request.task.value)
                ROUTER_FALLBACKS.labels(provider=candidate.provider_id, reason=reason).inc()
                continue

            return self._normalize(request.task, result, candidate.provider_id)

        return self._failure(request, decision, credentials, reason)

    def _model_for(self, request: CapabilityRequest, decision: RouteDecision, provider_id: str) -> str | None:
        if decision.pattern_matched:
            return request.model_hint
        if request.task == Task.CHAT:
            return _CHAIN_CHAT_MODELS.get(provider_id, settings.router.default_chat_model)
        # Media adapters fall back to their own default model
        return None

    async def _invoke(
        self,
        adapter: VendorAdapter,
        request: CapabilityRequest,
        decision: RouteDecision,
        candidate: Candidate,
    ) -> ChatResult | MediaResult:
        payload = request.payload
        options = request.options
        model = self._model_for(request, decision, candidate.provider_id)

        if request.task == Task.CHAT:
            return await adapter.chat(
                payload["messages"],
                model=model or settings.router.default_chat_model,
                max_tokens=options.max_tokens or settings.router.max_tokens_default,
                temperature=(
                    options.temperature
                    if options.temperature is not None
                    else settings.router.temperature_default
                ),
            )
        if request.task == Task.IMAGE:
            return await adapter.generate_image(
                payload["prompt"],
                model=model,
                size=options.size,
                style=options.style,
                quality=options.quality,
                n=options.n,
            )
        if request.task == Task.VIDEO:
            return await adapter.generate_video(
                payload["prompt"],
                model=model,
                duration=options.duration,
                aspect_ratio=options.aspect_ratio,
                image_url=options.image_url,
                avatar_id=options.avatar_id,
                voice=options.voice,
            )
        if request.task == Task.AUDIO:
            return await adapter.synthesize_speech(payload["text"], voice=options.voice, model=model)
        if request.task == Task.MUSIC:
            return await adapter.generate_music(
                payload["prompt"],
                model=model,
                genre=options.genre,
                mood=options.mood,
                duration=options.duration,
            )
        return await adapter.transcribe(
            payload["audio"],
            filename=payload.get("filename") or "audio.webm",
            language=options.language,
            model=model,
        )

    def _normalize(self, task: Task, result: ChatResult | MediaResult, provider_id: str) -> CanonicalResponse:
        if isinstance(result, ChatResult):
            response = normalize_chat(result, provider_id)
        else:
            response = normalize_media(task, result, provider_id)

        model = response.model or "unknown"
        TOKENS_TOTAL.labels(provider=provider_id, model=model, type="input").inc(response.usage.input_tokens)
        TOKENS_TOTAL.labels(provider=provider_id, model=model, type="output").inc(response.usage.output_tokens)
        COST_TOTAL_USD.labels(provider=provider_id, model=model).inc(response.cost)
        return response

    def _failure(
        self,
        request: CapabilityRequest,
        decision: RouteDecision,
        credentials: CredentialSnapshot,
        reason: str,
    ) -> CanonicalResponse:
        if degrades(request.task):
            # Keys that are already set are not worth suggesting after a vendor failure
            env_vars = [
                get_descriptor(c.provider_id).env_var
                for c in decision.candidates
                if reason == MISSING_CREDENTIAL or not c.present
            ]
            return degraded_response(request, env_vars, reason)

        selected = get_descriptor(decision.selected.provider_id)
        if request.task == Task.CHAT:
            missing = [get_descriptor(c.provider_id).env_var for c in decision.candidates if not c.present]
            configured = [
                PROVIDERS[pid].display_name
                for pid in credentials.configured()
                if PROVIDERS[pid].supports(Task.CHAT)
            ]
            return chat_failure(selected.id, missing, configured)

        return image_failure(selected.id, selected.env_var, decision.selected.present)

    async def video_status(self, video_id: str) -> dict[str, Any]:
        """Poll a HeyGen video job."""
        if not video_id:
            raise ValidationError("video_id parameter is required", field="video_id")
        adapter = self.adapter_factory("heygen", self.credentials_provider())
        try:
            status = await adapter.video_status(video_id)
        except (ConfigurationError, VendorError) as e:
            logger.warning("video_status_failed", video_id=video_id, error_code=e.error_code, error=e.message)
            return {"success": False, "video_id": video_id, "error": "Failed to check video status"}
        finally:
            await adapter.aclose()
        return {"success": True, "provider": "heygen", **status}

    async def avatar_catalog(self) -> dict[str, Any]:
        """Voices and avatars for talking videos, fetched concurrently."""
        credentials = self.credentials_provider()
        if not credentials.is_present("heygen"):
            return {
                "success": False,
                "voices": [],
                "avatars": [],
                "error": f"HeyGen is not configured: set {get_descriptor('heygen').env_var}",
            }
        adapter = self.adapter_factory("heygen", credentials)
        try:
            results = await gather_with_defaults(
                {"voices": adapter.list_voices(), "avatars": adapter.list_avatars()},
                default=[],
            )
        finally:
            await adapter.aclose()

        voices = [
            {
                "id": v.get("voice_id"),
                "name": v.get("name"),
                "gender": v.get("gender"),
                "language": v.get("language"),
                "language_code": v.get("language_code"),
                "preview_audio": v.get("preview_audio"),
            }
            for v in results["voices"][:CATALOG_LIMIT]
        ]
        avatars = [
            {
                "id": a.get("avatar_id"),
                "name": a.get("avatar_name") or a.get("name"),
                "gender": a.get("gender"),
                "preview_image": a.get("preview_image_url") or a.get("thumbnail_image_url"),
            }
            for a in results["avatars"][:CATALOG_LIMIT]
        ]
        return {
            "success": True,
            "voices": voices,
            "avatars": avatars,
            "message": f"Found {len(voices)} voices and {len(avatars)} avatars",
        }
