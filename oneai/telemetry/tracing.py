# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
from __future__ import annotations

from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import Span, get_current_span

TRACER_NAME = "oneai"


def init_tracing(
    service_name: str, sampling_ratio: float = 1.0, otlp_endpoint: str | None = None
) -> None:
    """Initialize OpenTelemetry tracing with optional OTLP exporter."""
    resource = Resource.create({"service.name": service_name})
    sampler = ParentBased(TraceIdRatioBased(float(sampling_ratio)))
    provider = TracerProvider(resource=resource, sampler=sampler)

    if otlp_endpoint:
        exporter = OTLPSpanExporter(endpoint=str(otlp_endpoint), insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)


def _set_attributes(span: Span, attrs: dict[str, Any]) -> None:
    for k, v in attrs.items():
        if v is None:
            continue
        # Span attributes only accept primitives
        if not isinstance(v, (str, bool, int, float)):
            v = str(v)
        span.set_attribute(k, v)


@contextmanager
def start_span(name: str, **attrs: Any) -> Iterator[Span]:
    """Synchronous context manager for creating spans."""
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        _set_attributes(span, attrs)
        yield span


@asynccontextmanager
async def start_span_async(name: str, **attrs: Any) -> AsyncIterator[Span]:
    """Asynchronous context manager for creating spans."""
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        _set_attributes(span, attrs)
        yield span


def get_trace_id() -> str | None:
    """Return current trace id in hex, if any."""
    ctx = get_current_span().get_span_context()
    if ctx.is_valid:
        return f"{ctx.trace_id:032x}"
    return None
