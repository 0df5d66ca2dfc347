# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Setup report: which providers have keys, which capabilities they unlock, and
what to configure next.
"""

from __future__ import annotations

from typing import Any

from .core.credentials import CredentialSnapshot
from .core.degradation import degrades
from .models import Task
from .providers.registry import PROVIDERS

CAPABILITY_NAMES = {
    Task.CHAT: "Chat Completion",
    Task.IMAGE: "Image Generation",
    Task.VIDEO: "Video Generation",
    Task.AUDIO: "Text-to-Speech",
    Task.TRANSCRIPTION: "Speech-to-Text",
    Task.MUSIC: "Music Generation",
}


def build_setup_status(credentials: CredentialSnapshot) -> dict[str, Any]:
    providers = [
        {
            "id": d.id,
            "name": d.display_name,
            "env_var": d.env_var,
            "is_configured": credentials.is_present(d.id),
            "capabilities": sorted(t.value for t in d.supported_tasks),
        }
        for d in sorted(PROVIDERS.values(), key=lambda d: d.priority)
    ]

    capabilities = []
    next_steps = []
    for task, name in CAPABILITY_NAMES.items():
        serving = [d for d in PROVIDERS.values() if d.supports(task)]
        available = any(credentials.is_present(d.id) for d in serving)
        required_keys = [d.env_var for d in sorted(serving, key=lambda d: d.priority)]
        capabilities.append(
            {
                "id": task.value,
                "name": name,
                "is_available": available,
                "demo_mode": not available and degrades(task),
                "required_keys": required_keys,
            }
        )
        if not available:
            next_steps.append(f"Add {' or '.join(required_keys)} to enable {name}")

    ready = sum(1 for c in capabilities if c["is_available"])
    return {
        "success": True,
        "setup_progress": round(ready / len(capabilities) * 100),
        "configured_capabilities": ready,
        "total_capabilities": len(capabilities),
        "providers": providers,
        "capabilities": capabilities,
        "next_steps": next_steps,
    }
