# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Dashboard usage aggregates.

Persistence lives outside the gateway and is reached only through the
``UsageStore`` protocol. Every sub-query runs concurrently and fails on its
own: a broken table reports 0 instead of failing the whole dashboard.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Protocol, runtime_checkable

import structlog

from .core.fanout import gather_with_defaults

logger = structlog.get_logger(__name__)

ACTIVITY_TABLES = (
    "chat_messages",
    "documents",
    "image_generations",
    "interior_designs",
    "image_enhancer_upscaler",
    "voice_transcriptions",
    "text_to_speech",
    "music_generations",
)

TOP_MODELS = 5


@runtime_checkable
class UsageStore(Protocol):
    """Read-only queries the aggregator needs, scoped to one user."""

    async def count(self, table: str, user_id: str) -> int: ...

    async def sum(self, table: str, column: str, user_id: str) -> float: ...

    async def column_values(self, table: str, column: str, user_id: str) -> list[Any]: ...

    async def created_since(self, table: str, user_id: str, since: datetime) -> list[datetime]: ...


class DashboardAggregator:
    def __init__(self, store: UsageStore) -> None:
        self.store = store

    async def counts(self, user_id: str) -> dict[str, int]:
        """Row counts for every activity table plus total chat tokens."""
        branches: dict[str, Any] = {table: self.store.count(table, user_id) for table in ACTIVITY_TABLES}
        branches["tokens_used"] = self.store.sum("chat_messages", "tokens_used", user_id)
        results = await gather_with_defaults(branches, default=0)
        return {name: int(value or 0) for name, value in results.items()}

    async def model_distribution(self, user_id: str) -> list[dict[str, Any]]:
        """Top models by share of chat messages, in whole percent."""
        results = await gather_with_defaults(
            {"models": self.store.column_values("chat_messages", "model_used", user_id)}, default=[]
        )
        counts = Counter(value or "unknown" for value in results["models"])
        total = sum(counts.values()) or 1
        return [
            {"name": name, "value": round(count / total * 100)}
            for name, count in counts.most_common(TOP_MODELS)
        ]

    async def activity(self, user_id: str, days: int = 7, today: date | None = None) -> list[dict[str, Any]]:
        """Events per day over the last ``days`` days, oldest first."""
        today = today or datetime.now(timezone.utc).date()
        start = today - timedelta(days=days - 1)
        since = datetime(start.year, start.month, start.day, tzinfo=timezone.utc)
        results = await gather_with_defaults(
            {table: self.store.created_since(table, user_id, since) for table in ACTIVITY_TABLES},
            default=[],
        )
        buckets: Counter[date] = Counter()
        for timestamps in results.values():
            buckets.update(ts.date() for ts in timestamps)
        return [
            {"name": day.strftime("%a"), "date": day.isoformat(), "value": buckets.get(day, 0)}
            for day in (start + timedelta(days=i) for i in range(days))
        ]

    async def summary(self, user_id: str) -> dict[str, Any]:
        counts = await self.counts(user_id)
        tokens = counts.pop("tokens_used")
        api_calls = sum(counts.values())
        logger.info("dashboard_summary", user_id=user_id, api_calls=api_calls)
        return {
            "metrics": {"apiCalls": api_calls, "totalTokens": tokens},
            "counts": counts,
            "usage": await self.activity(user_id),
            "models": await self.model_distribution(user_id),
        }
