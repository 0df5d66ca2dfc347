# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""Tests for credential resolution and snapshots."""

from oneai.core.credentials import CredentialSnapshot, resolve_credentials
from oneai.providers.registry import PROVIDERS


class TestCredentialSnapshot:
    def test_from_keys_marks_presence(self):
        snapshot = CredentialSnapshot.from_keys({"openai": "sk-test", "together": ""})

        assert snapshot.is_present("openai")
        assert snapshot.secret("openai") == "sk-test"
        # Empty string counts as absent
        assert not snapshot.is_present("together")
        assert snapshot.secret("together") is None
        assert snapshot.configured() == ["openai"]

    def test_every_provider_has_an_entry(self):
        snapshot = CredentialSnapshot.from_keys({})
        assert set(snapshot.credentials) == set(PROVIDERS)
        assert snapshot.get("replicate").env_var_name == "REPLICATE_API_TOKEN"
        assert snapshot.configured() == []

    def test_unknown_provider_is_absent(self):
        snapshot = CredentialSnapshot.from_keys({"openai": "sk-test"})
        credential = snapshot.get("nonexistent")
        assert credential.present is False
        assert credential.env_var_name == ""

    def test_repr_hides_secret(self):
        snapshot = CredentialSnapshot.from_keys({"anthropic": "sk-ant-secret"})
        assert "sk-ant-secret" not in repr(snapshot)
        assert "sk-ant-secret" not in repr(snapshot.get("anthropic"))

    def test_configured_follows_table_order(self):
        snapshot = CredentialSnapshot.from_keys({"suno": "s", "together": "t", "openai": "o"})
        assert snapshot.configured() == ["together", "openai", "suno"]


class TestResolveCredentials:
    def test_reads_environment(self, clean_provider_env):
        clean_provider_env.setenv("TOGETHER_API_KEY", "tg-key")
        clean_provider_env.setenv("REPLICATE_API_TOKEN", "r8-key")

        snapshot = resolve_credentials()

        assert snapshot.configured() == ["together", "replicate"]
        assert snapshot.secret("together") == "tg-key"

    def test_blank_variable_is_not_configured(self, clean_provider_env):
        clean_provider_env.setenv("OPENAI_API_KEY", "   ")
        assert not resolve_credentials().is_present("openai")

    def test_alias_variables(self, clean_provider_env):
        clean_provider_env.setenv("MOONSHOT_API_KEY", "moon")
        clean_provider_env.setenv("AIMLAPI_API_KEY", "aiml")

        snapshot = resolve_credentials()
        assert snapshot.is_present("kimi")
        assert snapshot.is_present("aimlapi")

    def test_each_call_sees_current_environment(self, clean_provider_env):
        assert not resolve_credentials().is_present("elevenlabs")

        clean_provider_env.setenv("ELEVENLABS_API_KEY", "el-key")
        assert resolve_credentials().is_present("elevenlabs")

        clean_provider_env.delenv("ELEVENLABS_API_KEY")
        assert not resolve_credentials().is_present("elevenlabs")

    def test_dotenv_file_is_read(self, clean_provider_env, tmp_path):
        (tmp_path / ".env").write_text("SUNO_API_KEY=from-dotenv\n")
        assert resolve_credentials().secret("suno") == "from-dotenv"
