# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Concurrent fan-out where each branch fails on its own.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


async def _guarded(name: str, awaitable: Awaitable[Any], default: Any) -> Any:
    try:
        return await awaitable
    except Exception as e:
        logger.warning("fanout_branch_failed", branch=name, error_type=type(e).__name__, error=str(e))
        return default


async def gather_with_defaults(
    branches: Mapping[str, Awaitable[Any]],
    default: Any = 0,
    defaults: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Run named awaitables concurrently and collect their results by name.

    A branch that raises is logged and replaced by its default
    (``defaults[name]`` if given, else ``default``); sibling branches are
    unaffected and the call itself never raises.
    """
    defaults = defaults or {}
    names = list(branches)
    results = await asyncio.gather(
        *(_guarded(name, branches[name], defaults.get(name, default)) for name in names)
    )
    return dict(zip(names, results))
