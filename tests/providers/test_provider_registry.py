# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""Tests for the provider table and adapter factory."""

import pytest

from oneai.core.exceptions import ConfigurationError, RoutingError
from oneai.models import Task
from oneai.providers import PROVIDERS, create_adapter, get_descriptor
from oneai.providers.openai import OpenAIAdapter
from oneai.providers.replicate import ReplicateAdapter


class TestProviderTable:
    def test_descriptor_matches_adapter(self):
        for provider_id, descriptor in PROVIDERS.items():
            assert descriptor.id == provider_id
            assert descriptor.adapter_cls.provider == provider_id
            assert descriptor.adapter_cls.env_var == descriptor.env_var

    def test_priorities_are_unique(self):
        priorities = [d.priority for d in PROVIDERS.values()]
        assert len(priorities) == len(set(priorities))

    def test_capabilities(self):
        assert PROVIDERS["openai"].supported_tasks == {Task.CHAT, Task.IMAGE, Task.AUDIO, Task.TRANSCRIPTION}
        assert PROVIDERS["replicate"].supports(Task.MUSIC)
        assert not PROVIDERS["anthropic"].supports(Task.IMAGE)
        assert PROVIDERS["heygen"].supported_tasks == {Task.VIDEO}

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            PROVIDERS["new"] = PROVIDERS["openai"]

    def test_unknown_provider(self):
        with pytest.raises(RoutingError):
            get_descriptor("nope")


class TestCreateAdapter:
    @pytest.mark.asyncio
    async def test_injects_credential(self, credentials):
        adapter = create_adapter("openai", credentials("openai"))
        try:
            assert isinstance(adapter, OpenAIAdapter)
            assert adapter.api_key == "test-openai-key"
            assert adapter.base_url == "https://api.openai.com/v1"
        finally:
            await adapter.aclose()

    @pytest.mark.asyncio
    async def test_aimlapi_base_url(self, credentials):
        adapter = create_adapter("aimlapi", credentials("aimlapi"))
        try:
            assert adapter.base_url == "https://api.aimlapi.com/v1"
        finally:
            await adapter.aclose()

    @pytest.mark.asyncio
    async def test_absent_credential_fails_on_use(self, credentials):
        adapter = create_adapter("replicate", credentials("openai"))
        try:
            assert isinstance(adapter, ReplicateAdapter)
            assert adapter.api_key is None
            with pytest.raises(ConfigurationError) as exc_info:
                await adapter.generate_image("a cat")
            assert exc_info.value.config_key == "REPLICATE_API_TOKEN"
        finally:
            await adapter.aclose()
