# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Degradation policy.

Speech, transcription, music and video never surface a hard error for a
missing key or a vendor outage: they return a successful, clearly labelled
demo payload whose ``note`` names the variable to configure, or says the
provider is unavailable when every candidate already had a key. Chat and image
are excluded and report ``success: false`` instead. A request degrades after
a single failed attempt.
"""

from __future__ import annotations

import math

from ..models import CanonicalResponse, CapabilityRequest, Task
from ..settings import settings
from ..telemetry.metrics import DEGRADED_RESPONSES

DEMO_PROVIDER = "demo"

DEGRADING_TASKS = frozenset({Task.AUDIO, Task.TRANSCRIPTION, Task.MUSIC, Task.VIDEO})

DEMO_TRANSCRIPTIONS = (
    "Hello, this is a demo transcription. The speech-to-text service is working in demo mode.",
    "This is an example of how speech recognition would work with your audio file.",
    "Configure your OpenAI API key to enable real speech-to-text processing.",
    "The audio you uploaded would be transcribed here with actual speech recognition.",
)

# Trigger reasons, also used as metric labels
MISSING_CREDENTIAL = "missing_credential"
ADAPTER_ERROR = "adapter_error"
EMPTY_OUTPUT = "empty_output"

OUTAGE_NOTE = "Provider is temporarily unavailable"


def degrades(task: Task) -> bool:
    return task in DEGRADING_TASKS


def concept_title(prefix: str, prompt: str, limit: int = 50) -> str:
    """``"<prefix>: <first 50 chars>"``, with an ellipsis when the prompt was cut."""
    return f"{prefix}: {prompt[:limit]}{'...' if len(prompt) > limit else ''}"


def _configure_hint(env_vars: list[str]) -> str:
    return " or ".join(env_vars) if env_vars else "a provider API key"


def degraded_response(
    request: CapabilityRequest, env_vars: list[str], reason: str
) -> CanonicalResponse:
    """Build the demo envelope for a degrading task.

    ``env_vars`` lists the variables that would enable the real provider,
    in routing order.
    """
    if not degrades(request.task):
        raise ValueError(f"{request.task.value} requests do not degrade")

    hint = _configure_hint(env_vars)
    # Every candidate had a key and still failed: nothing to configure
    outage = not env_vars and reason != MISSING_CREDENTIAL
    payload = request.payload
    options = request.options
    demo = settings.degradation

    if request.task == Task.AUDIO:
        text = payload.get("text", "")
        response = CanonicalResponse(
            success=True,
            degraded=True,
            provider=DEMO_PROVIDER,
            audio_url=demo.demo_audio_url,
            note=(
                f"Demo mode - {OUTAGE_NOTE} for speech synthesis"
                if outage
                else f"Demo mode - Configure {hint} for real speech synthesis"
            ),
            metadata={"duration": math.ceil(len(text) / 10), "voice": options.voice},
        )
    elif request.task == Task.TRANSCRIPTION:
        audio = payload.get("audio") or b""
        response = CanonicalResponse(
            success=True,
            degraded=True,
            provider=DEMO_PROVIDER,
            content=DEMO_TRANSCRIPTIONS[len(audio) % len(DEMO_TRANSCRIPTIONS)],
            audio_url=demo.demo_audio_url,
            note=(
                f"Demo mode - {OUTAGE_NOTE} for speech-to-text"
                if outage
                else f"Demo mode - Configure {hint} for real speech-to-text processing"
            ),
            metadata={"language": options.language or "en", "confidence": 0.85, "duration": 3.0},
        )
    elif request.task == Task.MUSIC:
        prompt = payload.get("prompt", "")
        genre = options.genre or "pop"
        mood = options.mood or "upbeat"
        duration = options.duration or 30
        response = CanonicalResponse(
            success=True,
            degraded=True,
            provider=DEMO_PROVIDER,
            status="completed",
            audio_url=demo.demo_music_url,
            title=concept_title("Music Concept", prompt),
            note=(
                f"Demo music track for your concept. Genre: {genre} | Mood: {mood} | "
                f"Duration: {duration}s. "
                + (
                    f"The {OUTAGE_NOTE.lower()} for music generation, try again later."
                    if outage
                    else f"Configure {hint} to enable real AI music generation."
                )
            ),
            metadata={"genre": genre, "mood": mood, "duration": duration},
        )
    else:
        prompt = payload.get("prompt", "")
        response = CanonicalResponse(
            success=True,
            degraded=True,
            provider=DEMO_PROVIDER,
            status="completed",
            thumbnail_url=demo.demo_video_thumbnail_url,
            title=concept_title("Video Concept", prompt),
            note=(
                f"The {OUTAGE_NOTE.lower()} for video generation, try again later."
                if outage
                else f"Video generation requires {hint}. Add it to your environment and restart the application."
            ),
            metadata={
                "duration": options.duration or 5,
                "input_image_provided": bool(options.image_url),
            },
        )

    response.metadata["degraded_reason"] = reason
    DEGRADED_RESPONSES.labels(task=request.task.value, reason=reason).inc()
    return response
