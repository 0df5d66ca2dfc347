# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Process-wide provider table and the adapter factory.

``PROVIDERS`` is built once at import and never mutated. Adapters are built
per request from a credential snapshot, so key presence always reflects the
environment at call time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..core.exceptions import RoutingError
from ..models import Task
from ..settings import settings
from .aimlapi import AIMLAdapter
from .anthropic import AnthropicAdapter
from .base import VendorAdapter
from .elevenlabs import ElevenLabsAdapter
from .google import GoogleAdapter
from .heygen import HeyGenAdapter
from .openai import OpenAIAdapter
from .openai_compatible import DeepSeekAdapter, KimiAdapter, XAIAdapter
from .replicate import ReplicateAdapter
from .suno import SunoAdapter
from .together import TogetherAdapter

if TYPE_CHECKING:
    from ..core.credentials import CredentialSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderDescriptor:
    """One row of the static provider table."""

    id: str
    display_name: str
    supported_tasks: frozenset[Task]
    match_patterns: tuple[str, ...]
    priority: int
    env_var: str
    settings_field: str
    adapter_cls: type[VendorAdapter]

    def supports(self, task: Task) -> bool:
        return task in self.supported_tasks


_DESCRIPTORS = (
    ProviderDescriptor(
        id="together",
        display_name="Together AI",
        supported_tasks=frozenset({Task.CHAT, Task.IMAGE}),
        match_patterns=("meta-llama/", "mistralai/", "deepseek-ai/", "Qwen/", "black-forest-labs/", "togethercomputer/"),
        priority=1,
        env_var="TOGETHER_API_KEY",
        settings_field="together_api_key",
        adapter_cls=TogetherAdapter,
    ),
    ProviderDescriptor(
        id="aimlapi",
        display_name="AI/ML API",
        supported_tasks=frozenset({Task.CHAT, Task.VIDEO}),
        match_patterns=("runway/",),
        priority=2,
        env_var="AIML_API_KEY",
        settings_field="aiml_api_key",
        adapter_cls=AIMLAdapter,
    ),
    ProviderDescriptor(
        id="openai",
        display_name="OpenAI",
        supported_tasks=frozenset({Task.CHAT, Task.IMAGE, Task.AUDIO, Task.TRANSCRIPTION}),
        match_patterns=("gpt-", "o1-", "dall-e", "whisper", "tts-1"),
        priority=3,
        env_var="OPENAI_API_KEY",
        settings_field="openai_api_key",
        adapter_cls=OpenAIAdapter,
    ),
    ProviderDescriptor(
        id="anthropic",
        display_name="Anthropic",
        supported_tasks=frozenset({Task.CHAT}),
        match_patterns=("claude-",),
        priority=4,
        env_var="ANTHROPIC_API_KEY",
        settings_field="anthropic_api_key",
        adapter_cls=AnthropicAdapter,
    ),
    ProviderDescriptor(
        id="google",
        display_name="Google Gemini",
        supported_tasks=frozenset({Task.CHAT}),
        match_patterns=("google/", "gemini"),
        priority=5,
        env_var="GOOGLE_API_KEY",
        settings_field="google_api_key",
        adapter_cls=GoogleAdapter,
    ),
    ProviderDescriptor(
        id="xai",
        display_name="xAI",
        supported_tasks=frozenset({Task.CHAT}),
        match_patterns=("grok", "xai"),
        priority=6,
        env_var="XAI_API_KEY",
        settings_field="xai_api_key",
        adapter_cls=XAIAdapter,
    ),
    ProviderDescriptor(
        id="deepseek",
        display_name="DeepSeek",
        supported_tasks=frozenset({Task.CHAT}),
        match_patterns=("deepseek",),
        priority=7,
        env_var="DEEPSEEK_API_KEY",
        settings_field="deepseek_api_key",
        adapter_cls=DeepSeekAdapter,
    ),
    ProviderDescriptor(
        id="kimi",
        display_name="Kimi",
        supported_tasks=frozenset({Task.CHAT}),
        match_patterns=("kimi", "moonshot"),
        priority=8,
        env_var="KIMI_API_KEY",
        settings_field="kimi_api_key",
        adapter_cls=KimiAdapter,
    ),
    ProviderDescriptor(
        id="replicate",
        display_name="Replicate",
        supported_tasks=frozenset({Task.IMAGE, Task.MUSIC}),
        match_patterns=("stability-ai/", "meta/musicgen"),
        priority=9,
        env_var="REPLICATE_API_TOKEN",
        settings_field="replicate_api_token",
        adapter_cls=ReplicateAdapter,
    ),
    ProviderDescriptor(
        id="elevenlabs",
        display_name="ElevenLabs",
        supported_tasks=frozenset({Task.AUDIO}),
        match_patterns=("eleven_",),
        priority=10,
        env_var="ELEVENLABS_API_KEY",
        settings_field="elevenlabs_api_key",
        adapter_cls=ElevenLabsAdapter,
    ),
    ProviderDescriptor(
        id="heygen",
        display_name="HeyGen",
        supported_tasks=frozenset({Task.VIDEO}),
        match_patterns=("heygen",),
        priority=11,
        env_var="HEYGEN_API_KEY",
        settings_field="heygen_api_key",
        adapter_cls=HeyGenAdapter,
    ),
    ProviderDescriptor(
        id="suno",
        display_name="Suno",
        supported_tasks=frozenset({Task.MUSIC}),
        match_patterns=("suno",),
        priority=12,
        env_var="SUNO_API_KEY",
        settings_field="suno_api_key",
        adapter_cls=SunoAdapter,
    ),
)

PROVIDERS: MappingProxyType[str, ProviderDescriptor] = MappingProxyType({d.id: d for d in _DESCRIPTORS})


def get_descriptor(provider_id: str) -> ProviderDescriptor:
    try:
        return PROVIDERS[provider_id]
    except KeyError:
        raise RoutingError(f"Unknown provider: {provider_id}") from None


def _base_url_for(provider_id: str) -> str:
    # ProviderEndpointsSettings uses aiml_ for the aimlapi provider
    field = "aiml_base_url" if provider_id == "aimlapi" else f"{provider_id}_base_url"
    return str(getattr(settings.endpoints, field))


def create_adapter(provider_id: str, credentials: CredentialSnapshot) -> VendorAdapter:
    """Build a fresh adapter for one request.

    The credential is injected even when absent; the adapter raises
    ``ConfigurationError`` on first use instead of sending an
    unauthenticated request.
    """
    descriptor = get_descriptor(provider_id)
    credential = credentials.get(provider_id)
    adapter = descriptor.adapter_cls(
        api_key=credentials.secret(provider_id),
        base_url=_base_url_for(provider_id),
        timeout_s=settings.adapters.timeout_ms / 1000,
    )
    logger.debug("Created %s adapter (credential present: %s)", provider_id, credential.present)
    return adapter
