# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Centralized application settings for OneAI.

This module provides a typed configuration system using Pydantic BaseSettings.
It organizes settings into logical groups and loads values from the environment
and an optional .env file at the repository root.

Provider keys are deliberately kept in their own group: the gateway builds a
fresh ``ProviderKeysSettings()`` for every request (see
``oneai.core.credentials``) so that key presence always reflects the current
environment.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AliasChoices, AnyUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class ProviderKeysSettings(BaseSettings):
    """Vendor credentials, one optional key per provider.

    Every key is independently optional: a missing key only disables the
    capabilities that need it.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", case_sensitive=False)

    together_api_key: str | None = Field(
        default=None,
        description="Together AI key for open models (chat, FLUX images).",
        validation_alias=AliasChoices("TOGETHER_API_KEY"),
    )
    aiml_api_key: str | None = Field(
        default=None,
        description="AI/ML API key (premium chat models and Runway video).",
        validation_alias=AliasChoices("AIML_API_KEY", "AIMLAPI_API_KEY"),
    )
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI key for GPT chat, DALL-E, Whisper and TTS.",
        validation_alias=AliasChoices("OPENAI_API_KEY"),
    )
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic key for Claude models.",
        validation_alias=AliasChoices("ANTHROPIC_API_KEY"),
    )
    google_api_key: str | None = Field(
        default=None,
        description="Google key for Gemini models.",
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GOOGLE_AI_API_KEY"),
    )
    xai_api_key: str | None = Field(
        default=None,
        description="xAI key for Grok models.",
        validation_alias=AliasChoices("XAI_API_KEY"),
    )
    deepseek_api_key: str | None = Field(
        default=None,
        description="DeepSeek key.",
        validation_alias=AliasChoices("DEEPSEEK_API_KEY"),
    )
    kimi_api_key: str | None = Field(
        default=None,
        description="Moonshot Kimi key.",
        validation_alias=AliasChoices("KIMI_API_KEY", "MOONSHOT_API_KEY"),
    )
    replicate_api_token: str | None = Field(
        default=None,
        description="Replicate token for hosted image and music models.",
        validation_alias=AliasChoices("REPLICATE_API_TOKEN"),
    )
    elevenlabs_api_key: str | None = Field(
        default=None,
        description="ElevenLabs key for text-to-speech.",
        validation_alias=AliasChoices("ELEVENLABS_API_KEY"),
    )
    heygen_api_key: str | None = Field(
        default=None,
        description="HeyGen key for talking avatar videos.",
        validation_alias=AliasChoices("HEYGEN_API_KEY"),
    )
    suno_api_key: str | None = Field(
        default=None,
        description="Suno key for music generation.",
        validation_alias=AliasChoices("SUNO_API_KEY"),
    )

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        # An exported-but-empty variable counts as not configured
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ProviderEndpointsSettings(BaseSettings):
    """Base URLs per vendor. Overridable for proxies and tests."""

    together_base_url: AnyUrl = Field(
        default="https://api.together.xyz/v1",
        validation_alias=AliasChoices("TOGETHER_BASE_URL"),
    )
    aiml_base_url: AnyUrl = Field(
        default="https://api.aimlapi.com/v1",
        validation_alias=AliasChoices("AIML_BASE_URL"),
    )
    openai_base_url: AnyUrl = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL"),
    )
    anthropic_base_url: AnyUrl = Field(
        default="https://api.anthropic.com",
        validation_alias=AliasChoices("ANTHROPIC_BASE_URL"),
    )
    google_base_url: AnyUrl = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias=AliasChoices("GOOGLE_BASE_URL"),
    )
    xai_base_url: AnyUrl = Field(
        default="https://api.x.ai/v1",
        validation_alias=AliasChoices("XAI_BASE_URL"),
    )
    deepseek_base_url: AnyUrl = Field(
        default="https://api.deepseek.com/v1",
        validation_alias=AliasChoices("DEEPSEEK_BASE_URL"),
    )
    kimi_base_url: AnyUrl = Field(
        default="https://api.moonshot.cn/v1",
        validation_alias=AliasChoices("KIMI_BASE_URL"),
    )
    replicate_base_url: AnyUrl = Field(
        default="https://api.replicate.com/v1",
        validation_alias=AliasChoices("REPLICATE_BASE_URL"),
    )
    elevenlabs_base_url: AnyUrl = Field(
        default="https://api.elevenlabs.io/v1",
        validation_alias=AliasChoices("ELEVENLABS_BASE_URL"),
    )
    heygen_base_url: AnyUrl = Field(
        default="https://api.heygen.com",
        validation_alias=AliasChoices("HEYGEN_BASE_URL"),
    )
    suno_base_url: AnyUrl = Field(
        default="https://api.sunoapi.org/api/v1",
        validation_alias=AliasChoices("SUNO_BASE_URL"),
    )


class ProviderAdapterSettings(BaseSettings):
    """Per-call limits for vendor adapters. Adapters never retry."""

    timeout_ms: int = Field(
        default=30000,
        description="Per-request timeout in milliseconds for vendor calls.",
        validation_alias=AliasChoices("PROVIDER_TIMEOUT_MS", "TIMEOUT_MS"),
    )
    replicate_poll_interval_ms: int = Field(
        default=5000,
        description="Delay between Replicate prediction status checks.",
        validation_alias=AliasChoices("REPLICATE_POLL_INTERVAL_MS"),
    )
    replicate_max_polls: int = Field(
        default=60,
        description="Status checks before a Replicate prediction counts as timed out.",
        validation_alias=AliasChoices("REPLICATE_MAX_POLLS"),
    )

    @field_validator("timeout_ms", "replicate_poll_interval_ms", "replicate_max_polls")
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be > 0")
        return value


class RouterSettings(BaseSettings):
    """Default models and sampling parameters per capability."""

    default_chat_model: str = Field(
        default="meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
        validation_alias=AliasChoices("DEFAULT_CHAT_MODEL", "ROUTER_DEFAULT_CHAT_MODEL"),
    )
    default_image_model: str = Field(
        default="black-forest-labs/FLUX.1-schnell",
        validation_alias=AliasChoices("DEFAULT_IMAGE_MODEL"),
    )
    default_replicate_image_model: str = Field(
        default="stability-ai/sdxl",
        validation_alias=AliasChoices("DEFAULT_REPLICATE_IMAGE_MODEL"),
    )
    default_replicate_music_model: str = Field(
        default="meta/musicgen",
        validation_alias=AliasChoices("DEFAULT_REPLICATE_MUSIC_MODEL"),
    )
    default_video_model: str = Field(
        default="runway/gen4_turbo",
        validation_alias=AliasChoices("DEFAULT_VIDEO_MODEL"),
    )
    default_elevenlabs_voice: str = Field(
        default="21m00Tcm4TlvDq8ikWAM",
        validation_alias=AliasChoices("DEFAULT_ELEVENLABS_VOICE"),
    )
    max_tokens_default: int = Field(
        default=1000,
        description="Default maximum output tokens when not specified in a request.",
        validation_alias=AliasChoices("MAX_TOKENS_DEFAULT", "ROUTER_MAX_TOKENS_DEFAULT"),
    )
    temperature_default: float = Field(
        default=0.7,
        description="Default sampling temperature to use when not provided.",
        validation_alias=AliasChoices("TEMPERATURE_DEFAULT", "ROUTER_TEMPERATURE_DEFAULT"),
    )
    chat_failover_enabled: bool = Field(
        default=True,
        description="Try the next configured chat provider when the chain's first choice fails.",
        validation_alias=AliasChoices("CHAT_FAILOVER_ENABLED"),
    )

    @field_validator("max_tokens_default")
    @classmethod
    def _validate_positive_int(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be > 0")
        return value


class DegradationSettings(BaseSettings):
    """Static placeholder assets served by the degradation policy."""

    demo_audio_url: str = Field(
        default="https://www.soundjay.com/misc/sounds/bell-ringing-05.wav",
        validation_alias=AliasChoices("DEMO_AUDIO_URL"),
    )
    demo_music_url: str = Field(
        default="/api/demo-audio",
        validation_alias=AliasChoices("DEMO_MUSIC_URL"),
    )
    demo_video_thumbnail_url: str = Field(
        default="https://via.placeholder.com/320x180/3B82F6/FFFFFF?text=Video+Concept",
        validation_alias=AliasChoices("DEMO_VIDEO_THUMBNAIL_URL"),
    )


class ObservabilitySettings(BaseSettings):
    """Logging, metrics and tracing settings."""

    log_level: str = Field(
        default="info",
        description="Log level for application logs.",
        validation_alias=AliasChoices("LOG_LEVEL", "OBS_LOG_LEVEL"),
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON lines.",
        validation_alias=AliasChoices("JSON_LOGS", "OBS_JSON_LOGS"),
    )
    otel_exporter_otlp_endpoint: AnyUrl | None = Field(
        default=None,
        description="OpenTelemetry OTLP endpoint for exporting traces.",
        validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_ENDPOINT", "OTEL_ENDPOINT"),
    )
    sampling_ratio: float = Field(
        default=1.0,
        description="Trace sampling ratio between 0.0 and 1.0.",
        validation_alias=AliasChoices("OTEL_SAMPLING_RATIO", "OBS_SAMPLING_RATIO"),
    )
    prometheus_enabled: bool = Field(
        default=True,
        description="Enable Prometheus metrics endpoint.",
        validation_alias=AliasChoices("PROMETHEUS_ENABLED", "OBS_PROMETHEUS_ENABLED"),
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        """Normalize log level to lowercase string."""
        if isinstance(value, str):
            return value.lower()
        return str(value)

    @field_validator("sampling_ratio")
    @classmethod
    def _validate_ratio(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("OTEL_SAMPLING_RATIO must be between 0.0 and 1.0")
        return value


class ServerSettings(BaseSettings):
    """Server runtime parameters."""

    host: str = Field(
        default="0.0.0.0",
        description="Server host to bind to (use 0.0.0.0 in containers).",
        validation_alias=AliasChoices("HOST", "SERVER_HOST"),
    )
    port: int = Field(
        default=8000,
        description="Server port to listen on (must be > 0).",
        validation_alias=AliasChoices("PORT", "SERVER_PORT"),
    )
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="List of allowed CORS origins (comma-separated string or list).",
        validation_alias=AliasChoices("CORS_ORIGINS"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value: Any) -> Any:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if value is None:
            return []
        return value

    @field_validator("port")
    @classmethod
    def _validate_port(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("PORT must be > 0")
        return value


class Settings(BaseSettings):
    """Root settings object combining all configuration groups."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    endpoints: ProviderEndpointsSettings = ProviderEndpointsSettings()
    adapters: ProviderAdapterSettings = ProviderAdapterSettings()
    router: RouterSettings = RouterSettings()
    degradation: DegradationSettings = DegradationSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    server: ServerSettings = ServerSettings()


# Singleton settings instance used across the application
settings = Settings()
