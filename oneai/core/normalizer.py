# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Response normalization.

Turns adapter output into the canonical envelope. Everything here is pure:
the same adapter output always yields the same envelope, and no vendor error
text is ever copied into it.

Cost uses a flat per-token rate that ignores vendor pricing. It is a
placeholder for dashboard display and must not be presented as a bill.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..models import CanonicalResponse, ChatResult, MediaResult, Task, TokenUsage
from .exceptions import InternalError

INPUT_TOKEN_RATE = 0.0001
OUTPUT_TOKEN_RATE = 0.0002

# Vendor field names, in the order they are consulted
_INPUT_FIELDS = ("input_tokens", "prompt_tokens")
_OUTPUT_FIELDS = ("output_tokens", "completion_tokens")


def _first_count(usage: Mapping[str, Any], fields: Iterable[str]) -> int:
    for name in fields:
        value = usage.get(name)
        # 0 falls through to the next field name
        if value:
            try:
                return max(int(value), 0)
            except (TypeError, ValueError):
                continue
    return 0


def extract_usage(usage: Mapping[str, Any] | None) -> TokenUsage:
    """Read token counts from a vendor usage object.

    Input tokens come from ``input_tokens`` then ``prompt_tokens``; output
    tokens from ``output_tokens`` then ``completion_tokens``; 0 otherwise.
    """
    if not usage:
        return TokenUsage()
    return TokenUsage(
        input_tokens=_first_count(usage, _INPUT_FIELDS),
        output_tokens=_first_count(usage, _OUTPUT_FIELDS),
    )


def compute_cost(usage: TokenUsage) -> float:
    return round(usage.input_tokens * INPUT_TOKEN_RATE + usage.output_tokens * OUTPUT_TOKEN_RATE, 6)


def as_url_list(output: Any) -> list[str]:
    """Coerce a vendor's image/audio/video output into a list of URLs.

    Vendors return a bare string for single outputs and an array otherwise;
    objects carrying a ``url`` key are unwrapped.
    """
    if output is None:
        return []
    if isinstance(output, str):
        return [output] if output else []
    if isinstance(output, Mapping):
        url = output.get("url")
        return [url] if isinstance(url, str) and url else []
    if isinstance(output, (list, tuple)):
        urls: list[str] = []
        for item in output:
            urls.extend(as_url_list(item))
        return urls
    return []


def has_content(task: Task, result: ChatResult | MediaResult) -> bool:
    """Whether an adapter result carries something the caller can use."""
    if isinstance(result, ChatResult):
        return bool(result.content and result.content.strip())
    if task == Task.TRANSCRIPTION:
        return bool(result.content and result.content.strip())
    if result.urls:
        return True
    # Accepted asynchronous jobs are polled later
    return task in (Task.VIDEO, Task.MUSIC) and bool(result.job_id) and result.status == "processing"


def normalize_chat(result: ChatResult, provider: str, model: str | None = None) -> CanonicalResponse:
    usage = extract_usage(result.usage)
    return CanonicalResponse(
        success=True,
        content=result.content,
        usage=usage,
        cost=compute_cost(usage),
        provider=provider,
        model=result.model or model,
    )


def normalize_media(
    task: Task, result: MediaResult, provider: str, model: str | None = None
) -> CanonicalResponse:
    """Place media output in the envelope field that matches the task."""
    usage = extract_usage(result.usage)
    fields: dict[str, Any] = {}
    if task == Task.IMAGE:
        fields["images"] = as_url_list(result.urls)
    elif task == Task.VIDEO:
        urls = as_url_list(result.urls)
        fields["video_url"] = urls[0] if urls else None
        fields["status"] = result.status or ("completed" if urls else None)
    elif task in (Task.AUDIO, Task.MUSIC):
        urls = as_url_list(result.urls)
        fields["audio_url"] = urls[0] if urls else None
        if task == Task.MUSIC:
            fields["status"] = result.status or ("completed" if urls else None)
    elif task == Task.TRANSCRIPTION:
        fields["content"] = result.content

    return CanonicalResponse(
        success=True,
        thumbnail_url=result.thumbnail_url,
        title=result.title,
        job_id=result.job_id,
        usage=usage,
        cost=compute_cost(usage),
        provider=provider,
        model=result.model or model,
        metadata=dict(result.metadata),
        **fields,
    )


def chat_failure(provider: str, missing: list[str], configured: list[str]) -> CanonicalResponse:
    """In-band assistant message used when no chat provider produced an answer.

    ``missing`` lists the env vars of attempted providers that have no key;
    ``configured`` the display names of providers that do.
    """
    lines = ["I couldn't reach an AI provider to answer this message.", "", "**Troubleshooting Steps:**"]
    if missing:
        lines.append(f"1. Add {' or '.join(missing)} to your environment")
    else:
        lines.append("1. Check that your API keys are valid and have remaining credits")
    lines.append("2. Restart the application after changing environment variables")
    lines.append("3. Try again in a moment if the provider is rate limiting requests")
    lines.append("")
    if configured:
        lines.append(f"**Configured providers:** {', '.join(configured)}")
    else:
        lines.append("**Configured providers:** none")
    return CanonicalResponse(
        success=False,
        content="\n".join(lines),
        provider=provider,
        error="chat_unavailable",
    )


def image_failure(provider: str, env_var: str | None, configured: bool) -> CanonicalResponse:
    """Actionable image error. Never a demo picture."""
    if not configured and env_var:
        message = f"Image generation is not configured. Set {env_var} to enable it."
    else:
        message = f"Image generation with {provider} failed. Check the API key and try again."
    return CanonicalResponse(success=False, provider=provider, error=message)


def internal_failure(task: Task, error: InternalError | None = None) -> CanonicalResponse:
    """Generic failure envelope. Only the error code of ``error`` is exposed."""
    return CanonicalResponse(
        success=False,
        provider="none",
        error=f"The {task.value} request could not be completed due to an internal error.",
        metadata={"error_code": error.error_code} if error is not None else {},
    )
