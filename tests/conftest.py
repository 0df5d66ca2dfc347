# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Shared test fixtures for the OneAI test suite.

This module provides:
- Credential snapshot factories
- Fake vendor adapters that record calls instead of doing network I/O
- A capability service wired to the fakes
"""

from typing import Any, Callable

import pytest

from oneai.core.credentials import CredentialSnapshot
from oneai.core.exceptions import ConfigurationError
from oneai.providers.registry import PROVIDERS, get_descriptor
from oneai.service import CapabilityService

# Every environment variable that can supply a provider key
PROVIDER_ENV_VARS = sorted(
    {d.env_var for d in PROVIDERS.values()}
    | {"AIMLAPI_API_KEY", "GOOGLE_AI_API_KEY", "MOONSHOT_API_KEY"}
)


class FakeAdapter:
    """Stand-in for a vendor adapter.

    ``responses`` maps an operation name to the value it returns; an
    exception instance is raised instead.
    """

    def __init__(self, provider_id: str, responses: dict[str, Any] | None = None):
        self.provider = provider_id
        self.responses = responses or {}
        self.calls: list[tuple[str, tuple, dict]] = []
        self.closed = False

    async def _respond(self, op: str, *args: Any, **kwargs: Any) -> Any:
        self.calls.append((op, args, kwargs))
        value = self.responses.get(op)
        if isinstance(value, BaseException):
            raise value
        return value

    async def chat(self, messages, model, max_tokens=None, temperature=None):
        return await self._respond(
            "chat", messages, model=model, max_tokens=max_tokens, temperature=temperature
        )

    async def generate_image(self, prompt, model=None, size=None, style=None, quality=None, n=None):
        return await self._respond(
            "generate_image", prompt, model=model, size=size, style=style, quality=quality, n=n
        )

    async def generate_video(self, prompt, model=None, **options):
        return await self._respond("generate_video", prompt, model=model, **options)

    async def synthesize_speech(self, text, voice=None, model=None):
        return await self._respond("synthesize_speech", text, voice=voice, model=model)

    async def transcribe(self, audio, filename="audio.webm", language=None, model=None):
        return await self._respond(
            "transcribe", audio, filename=filename, language=language, model=model
        )

    async def generate_music(self, prompt, model=None, **options):
        return await self._respond("generate_music", prompt, model=model, **options)

    async def video_status(self, video_id):
        return await self._respond("video_status", video_id)

    async def list_voices(self):
        return await self._respond("list_voices")

    async def list_avatars(self):
        return await self._respond("list_avatars")

    async def aclose(self) -> None:
        self.closed = True


class FakeAdapterFactory:
    """Adapter factory that hands out ``FakeAdapter`` instances.

    Like the real adapters, an adapter built without a credential raises
    ``ConfigurationError`` on first use.
    """

    def __init__(self, responses: dict[str, dict[str, Any]] | None = None):
        self.responses = responses or {}
        self.created: list[FakeAdapter] = []

    def __call__(self, provider_id: str, credentials: CredentialSnapshot) -> FakeAdapter:
        responses = dict(self.responses.get(provider_id, {}))
        if not credentials.is_present(provider_id):
            env_var = get_descriptor(provider_id).env_var
            missing = ConfigurationError(f"{provider_id} is not configured", config_key=env_var)
            responses = {op: missing for op in _OPERATIONS}
        adapter = FakeAdapter(provider_id, responses)
        self.created.append(adapter)
        return adapter

    def providers_called(self) -> list[str]:
        return [a.provider for a in self.created if a.calls]


_OPERATIONS = (
    "chat",
    "generate_image",
    "generate_video",
    "synthesize_speech",
    "transcribe",
    "generate_music",
    "video_status",
    "list_voices",
    "list_avatars",
)


@pytest.fixture
def credentials() -> Callable[..., CredentialSnapshot]:
    """Build a snapshot from provider ids: ``credentials("openai", "together")``."""

    def _build(*provider_ids: str) -> CredentialSnapshot:
        return CredentialSnapshot.from_keys({pid: f"test-{pid}-key" for pid in provider_ids})

    return _build


@pytest.fixture
def make_service(credentials) -> Callable[..., tuple[CapabilityService, FakeAdapterFactory]]:
    """Capability service over fake adapters and a fixed credential snapshot."""

    def _build(
        keys: tuple[str, ...] = (), responses: dict[str, dict[str, Any]] | None = None
    ) -> tuple[CapabilityService, FakeAdapterFactory]:
        snapshot = credentials(*keys)
        factory = FakeAdapterFactory(responses)
        service = CapabilityService(credentials_provider=lambda: snapshot, adapter_factory=factory)
        return service, factory

    return _build


@pytest.fixture
def clean_provider_env(monkeypatch, tmp_path):
    """Remove provider keys from the environment and hide any local .env file."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch

