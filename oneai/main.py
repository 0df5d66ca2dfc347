# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
HTTP surface for the OneAI capability gateway.

Handlers stay thin: parse the body, hand a ``CapabilityRequest`` to the
service and serialize the canonical envelope. Only request validation
errors become 4xx responses; vendor and configuration problems are already
folded into the envelope by the service.
"""

import time
from datetime import datetime
from typing import Any

import structlog
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from . import __version__
from .analytics import DashboardAggregator, UsageStore
from .core.credentials import resolve_credentials
from .core.exceptions import ValidationError
from .models import (
    CanonicalResponse,
    CapabilityRequest,
    ChatRequest,
    ErrorResponse,
    HealthResponse,
    ImageRequest,
    MusicRequest,
    RequestOptions,
    SpeechRequest,
    Task,
    VideoRequest,
)
from .service import CapabilityService
from .settings import settings
from .setup_status import build_setup_status
from .telemetry.logging import configure_logging
from .telemetry.metrics import HTTP_LATENCY, HTTP_REQUESTS_TOTAL
from .telemetry.tracing import get_trace_id, init_tracing, start_span

logger = structlog.get_logger(__name__)

configure_logging(settings.observability.log_level, settings.observability.json_logs)
if settings.observability.otel_exporter_otlp_endpoint:
    init_tracing(
        service_name="oneai",
        sampling_ratio=settings.observability.sampling_ratio,
        otlp_endpoint=str(settings.observability.otel_exporter_otlp_endpoint),
    )

app = FastAPI(
    title="OneAI - Capability Gateway",
    description="Routes chat, image, video, speech, music and transcription requests to AI vendors",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

UNMATCHED_ROUTE = "unmatched"

_service = CapabilityService()

# Deployments that keep usage history install a store here
_usage_store: UsageStore | None = None


def get_service() -> CapabilityService:
    return _service


def get_usage_store() -> UsageStore | None:
    return _usage_store


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body validation errors."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse.create(
            message=f"Invalid request: {exc.errors()}",
            error_type="invalid_request_error",
            code="validation_error",
        ).model_dump(),
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Missing or invalid capability fields, rejected before routing."""
    return JSONResponse(status_code=400, content=exc.to_dict())


def _route_label(request: Request) -> str:
    """Path template of the matched route; raw paths would make one series per id."""
    route = request.scope.get("route")
    return route.path if route is not None else UNMATCHED_ROUTE


@app.middleware("http")
async def request_observability_middleware(request: Request, call_next):
    method = request.method
    start_ts = time.perf_counter()
    status = "500"
    with start_span("http.request", method=method) as span:
        try:
            response = await call_next(request)
            status = str(response.status_code)
        finally:
            # Routing has run by now, so the matched route is in scope
            route = _route_label(request)
            span.set_attribute("http.route", route)
            elapsed_ms = (time.perf_counter() - start_ts) * 1000
            HTTP_REQUESTS_TOTAL.labels(route=route, method=method, status=status).inc()
            HTTP_LATENCY.labels(route=route, method=method).observe(elapsed_ms)
        trace_id = get_trace_id()
    if trace_id:
        response.headers["x-trace-id"] = trace_id
    return response


def _envelope(response: CanonicalResponse) -> dict[str, Any]:
    return response.model_dump(exclude_none=True)


@app.post("/v1/chat")
async def chat(body: ChatRequest, service: CapabilityService = Depends(get_service)) -> dict[str, Any]:
    return _envelope(await service.handle(body.to_capability_request()))


@app.post("/v1/images")
async def generate_image(
    body: ImageRequest, service: CapabilityService = Depends(get_service)
) -> dict[str, Any]:
    return _envelope(await service.handle(body.to_capability_request()))


@app.post("/v1/videos")
async def generate_video(
    body: VideoRequest, service: CapabilityService = Depends(get_service)
) -> dict[str, Any]:
    return _envelope(await service.handle(body.to_capability_request()))


@app.post("/v1/speech")
async def text_to_speech(
    body: SpeechRequest, service: CapabilityService = Depends(get_service)
) -> dict[str, Any]:
    return _envelope(await service.handle(body.to_capability_request()))


@app.post("/v1/music")
async def generate_music(
    body: MusicRequest, service: CapabilityService = Depends(get_service)
) -> dict[str, Any]:
    return _envelope(await service.handle(body.to_capability_request()))


@app.post("/v1/transcriptions")
async def speech_to_text(
    audio: UploadFile | None = File(None),
    language: str = Form("en"),
    model: str | None = Form(None),
    service: CapabilityService = Depends(get_service),
) -> dict[str, Any]:
    content = await audio.read() if audio is not None else b""
    request = CapabilityRequest(
        task=Task.TRANSCRIPTION,
        model_hint=model,
        payload={"audio": content, "filename": audio.filename if audio is not None else None},
        options=RequestOptions(language=language),
    )
    return _envelope(await service.handle(request))


@app.get("/v1/videos/{video_id}/status")
async def video_status(video_id: str, service: CapabilityService = Depends(get_service)) -> dict[str, Any]:
    return await service.video_status(video_id)


@app.get("/v1/avatars/catalog")
async def avatar_catalog(service: CapabilityService = Depends(get_service)) -> dict[str, Any]:
    return await service.avatar_catalog()


@app.get("/v1/setup/status")
async def setup_status() -> dict[str, Any]:
    return build_setup_status(resolve_credentials())


@app.get("/v1/analytics", response_model=None)
async def dashboard_analytics(
    user_id: str, store: UsageStore | None = Depends(get_usage_store)
) -> dict[str, Any] | JSONResponse:
    """Per-user dashboard aggregates; individual failing queries count as 0."""
    if store is None:
        return JSONResponse(
            status_code=503,
            content=ErrorResponse.create(
                "Usage analytics store is not configured", error_type="service_unavailable"
            ).model_dump(),
        )
    return {"success": True, **await DashboardAggregator(store).summary(user_id)}


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__, timestamp=datetime.now())


@app.get("/metrics/prometheus", include_in_schema=False)
async def prometheus_metrics() -> Response:
    if not settings.observability.prometheus_enabled:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse.create("Prometheus metrics are disabled", error_type="not_found").model_dump(),
        )
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def main() -> None:
    import uvicorn

    uvicorn.run("oneai.main:app", host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
