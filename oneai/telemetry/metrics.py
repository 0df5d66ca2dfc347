# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Prometheus metrics for OneAI telemetry.

Provider calls, routing decisions, degraded responses and HTTP traffic are
counted here and exposed at ``/metrics/prometheus``.
"""

from typing import Dict, Protocol, runtime_checkable

from prometheus_client import Counter, Histogram


@runtime_checkable
class _CounterProtocol(Protocol):
    def labels(self, *label_values: str, **label_kwargs: str) -> "_CounterProtocol": ...

    def inc(self, amount: float = 1.0) -> None: ...


@runtime_checkable
class _HistogramProtocol(Protocol):
    def labels(self, *label_values: str, **label_kwargs: str) -> "_HistogramProtocol": ...

    def observe(self, amount: float, exemplar: Dict[str, str] | None = None) -> None: ...


# Request metrics
HTTP_REQUESTS_TOTAL: _CounterProtocol = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["route", "method", "status"],
)

HTTP_LATENCY: _HistogramProtocol = Histogram(
    "http_request_duration_milliseconds",
    "HTTP request duration in milliseconds",
    ["route", "method"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000],
)

# Router metrics
ROUTING_DECISIONS: _CounterProtocol = Counter(
    "oneai_routing_decisions_total",
    "Routing decisions by task, selected provider and rule kind",
    ["task", "provider", "rule"],
)

ROUTER_FALLBACKS: _CounterProtocol = Counter(
    "oneai_router_fallbacks_total",
    "Chat failover attempts by the provider that failed and the reason",
    ["provider", "reason"],
)

# Provider metrics
PROVIDER_REQUESTS: _CounterProtocol = Counter(
    "oneai_provider_requests_total",
    "Provider requests by provider, task, and outcome",
    ["provider", "task", "outcome"],
)

PROVIDER_LATENCY: _HistogramProtocol = Histogram(
    "oneai_provider_latency_seconds",
    "Provider response latency in seconds",
    ["provider", "task"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0],
)

# Envelope metrics
DEGRADED_RESPONSES: _CounterProtocol = Counter(
    "oneai_degraded_responses_total",
    "Demo responses served instead of a vendor result",
    ["task", "reason"],
)

TOKENS_TOTAL: _CounterProtocol = Counter(
    "oneai_tokens_total",
    "Total tokens by provider and model",
    ["provider", "model", "type"],
)

COST_TOTAL_USD: _CounterProtocol = Counter(
    "oneai_cost_total_usd",
    "Placeholder cost computed from usage, by provider and model",
    ["provider", "model"],
)
