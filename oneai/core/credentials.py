# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Credential resolution.

The environment is read in exactly one place: ``resolve_credentials`` builds a
fresh ``ProviderKeysSettings`` and freezes it into a ``CredentialSnapshot``.
The service resolves once per request and injects the snapshot into the
router and the adapters; nothing caches it across requests.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..providers.registry import PROVIDERS
from ..settings import ProviderKeysSettings


@dataclass(frozen=True)
class ProviderCredential:
    provider_id: str
    env_var_name: str
    present: bool
    # Never part of repr so snapshots are safe to log
    value: str | None = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class CredentialSnapshot:
    """Read-only view of which provider keys are configured."""

    credentials: Mapping[str, ProviderCredential]

    def get(self, provider_id: str) -> ProviderCredential:
        credential = self.credentials.get(provider_id)
        if credential is None:
            descriptor = PROVIDERS.get(provider_id)
            env_var = descriptor.env_var if descriptor else ""
            return ProviderCredential(provider_id=provider_id, env_var_name=env_var, present=False)
        return credential

    def is_present(self, provider_id: str) -> bool:
        return self.get(provider_id).present

    def secret(self, provider_id: str) -> str | None:
        return self.get(provider_id).value

    def configured(self) -> list[str]:
        """Provider ids with a key, in table order."""
        return [pid for pid, cred in self.credentials.items() if cred.present]

    @classmethod
    def from_keys(cls, keys: Mapping[str, str | None]) -> "CredentialSnapshot":
        """Build a snapshot from ``{provider_id: key}``; handy for tests and tooling."""
        creds = {}
        for pid, descriptor in PROVIDERS.items():
            value = keys.get(pid) or None
            creds[pid] = ProviderCredential(pid, descriptor.env_var, value is not None, value)
        return cls(MappingProxyType(creds))


def resolve_credentials(keys: ProviderKeysSettings | None = None) -> CredentialSnapshot:
    """Snapshot the provider keys currently present in the environment."""
    keys = keys if keys is not None else ProviderKeysSettings()
    return CredentialSnapshot.from_keys(
        {pid: getattr(keys, descriptor.settings_field) for pid, descriptor in PROVIDERS.items()}
    )
