# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Pydantic models for capability requests, the canonical response envelope and
the HTTP request/response schemas.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Task(str, Enum):
    """Capability categories the gateway can fulfil."""

    CHAT = "chat"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    MUSIC = "music"
    TRANSCRIPTION = "transcription"


class ChatMessage(BaseModel):
    """Individual chat message in a conversation."""

    role: Literal["system", "user", "assistant"] = Field(..., description="The role of the message author")
    content: str = Field(..., description="The content of the message")


class RequestOptions(BaseModel):
    """Task options. Accepts both snake_case and the dashboard's camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    max_tokens: int | None = Field(None, alias="maxTokens", gt=0)
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    size: str | None = Field(None, description="Image size such as 1024x1024")
    style: str | None = None
    quality: str | None = None
    n: int | None = Field(None, ge=1, le=4)
    voice: str | None = Field(None, description="Vendor voice identifier")
    language: str | None = None
    duration: int | None = Field(None, gt=0, description="Clip length in seconds")
    aspect_ratio: str | None = Field(None, alias="aspectRatio")
    genre: str | None = None
    mood: str | None = None
    image_url: str | None = Field(None, alias="imageUrl")
    avatar_id: str | None = Field(None, alias="avatarId")


class CapabilityRequest(BaseModel):
    """One inbound call, immutable once built.

    ``payload`` holds the task-specific fields: ``messages`` for chat,
    ``prompt`` for image/video/music, ``text`` for speech and
    ``audio``/``filename`` for transcription.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    task: Task
    model_hint: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    options: RequestOptions = Field(default_factory=RequestOptions)


class TokenUsage(BaseModel):
    """Token usage information."""

    input_tokens: int = Field(0, ge=0)
    output_tokens: int = Field(0, ge=0)


class CanonicalResponse(BaseModel):
    """The single envelope returned for every capability, whichever vendor served it."""

    success: bool
    content: str | None = None
    images: list[str] | None = None
    audio_url: str | None = None
    video_url: str | None = None
    thumbnail_url: str | None = None
    title: str | None = None
    status: str | None = None
    job_id: str | None = None
    usage: TokenUsage = Field(default_factory=TokenUsage)
    cost: float = 0.0
    provider: str
    model: str | None = None
    error: str | None = None
    note: str | None = None
    degraded: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _degraded_is_successful(self) -> "CanonicalResponse":
        if self.degraded and (not self.success or self.error is not None):
            raise ValueError("degraded responses must be successful and carry no error")
        return self


@dataclass
class ChatResult:
    """Chat adapter output.

    - content: assistant text
    - usage: vendor usage object, read later by the normalizer
    - model: model that served the request
    - raw: raw vendor payload
    """

    content: str
    usage: dict[str, Any] = field(default_factory=dict)
    model: str | None = None
    raw: Any | None = None


@dataclass
class MediaResult:
    """Media adapter output. ``urls`` is always a list."""

    urls: list[str] = field(default_factory=list)
    model: str | None = None
    content: str | None = None
    status: str | None = None
    job_id: str | None = None
    thumbnail_url: str | None = None
    title: str | None = None
    usage: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    raw: Any | None = None


# HTTP request bodies


class ChatRequest(BaseModel):
    """Request schema for the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(default_factory=list)
    model: str | None = Field(None, description="Model hint; empty means use the default chain")
    max_tokens: int | None = Field(None, alias="maxTokens", gt=0)
    temperature: float | None = Field(None, ge=0.0, le=2.0)

    def to_capability_request(self) -> CapabilityRequest:
        return CapabilityRequest(
            task=Task.CHAT,
            model_hint=self.model,
            payload={"messages": self.messages},
            options=RequestOptions(max_tokens=self.max_tokens, temperature=self.temperature),
        )


class ImageRequest(BaseModel):
    """Request schema for the image endpoint."""

    prompt: str = ""
    model: str | None = None
    size: str | None = None
    style: str | None = None
    quality: str | None = None
    n: int | None = Field(None, ge=1, le=4)

    def to_capability_request(self) -> CapabilityRequest:
        return CapabilityRequest(
            task=Task.IMAGE,
            model_hint=self.model,
            payload={"prompt": self.prompt},
            options=RequestOptions(size=self.size, style=self.style, quality=self.quality, n=self.n),
        )


class VideoRequest(BaseModel):
    """Request schema for text-to-video and talking avatar videos."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    model: str | None = None
    duration: int | None = Field(None, gt=0)
    aspect_ratio: str | None = Field(None, alias="aspectRatio")
    image_url: str | None = Field(None, alias="imageUrl")
    avatar_id: str | None = Field(None, alias="avatarId")
    voice: str | None = Field(None, validation_alias=AliasChoices("voiceId", "voice"))

    def to_capability_request(self) -> CapabilityRequest:
        return CapabilityRequest(
            task=Task.VIDEO,
            model_hint=self.model,
            payload={"prompt": self.prompt},
            options=RequestOptions(
                duration=self.duration,
                aspect_ratio=self.aspect_ratio,
                image_url=self.image_url,
                avatar_id=self.avatar_id,
                voice=self.voice,
            ),
        )


class SpeechRequest(BaseModel):
    """Request schema for text-to-speech."""

    text: str = ""
    voice: str | None = None
    model: str | None = None

    def to_capability_request(self) -> CapabilityRequest:
        return CapabilityRequest(
            task=Task.AUDIO,
            model_hint=self.model,
            payload={"text": self.text},
            options=RequestOptions(voice=self.voice),
        )


class MusicRequest(BaseModel):
    """Request schema for music generation."""

    prompt: str = ""
    model: str | None = None
    genre: str = "pop"
    mood: str = "upbeat"
    duration: int = Field(30, gt=0)

    def to_capability_request(self) -> CapabilityRequest:
        return CapabilityRequest(
            task=Task.MUSIC,
            model_hint=self.model,
            payload={"prompt": self.prompt},
            options=RequestOptions(genre=self.genre, mood=self.mood, duration=self.duration),
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Current timestamp")


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: dict[str, Any] = Field(..., description="Error details")

    @classmethod
    def create(
        cls,
        message: str,
        error_type: str = "invalid_request_error",
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> "ErrorResponse":
        return cls(error={"message": message, "type": error_type, "code": code, "details": details or {}})
