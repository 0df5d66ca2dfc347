# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""Wire-format tests for image, video, speech, transcription and music adapters."""

import pytest

from oneai.core.exceptions import AdapterTimeoutError, VendorError
from oneai.providers.aimlapi import AIMLAdapter
from oneai.providers.elevenlabs import DEFAULT_TTS_MODEL, ElevenLabsAdapter
from oneai.providers.heygen import DEFAULT_AVATAR_ID, HeyGenAdapter, map_video_status
from oneai.providers.openai import OpenAIAdapter
from oneai.providers.replicate import ReplicateAdapter
from oneai.providers.suno import SunoAdapter
from oneai.providers.together import TogetherAdapter
from oneai.settings import settings
from tests.fixtures.http import RecordingClient, vendor_response


class TestOpenAIMedia:
    @pytest.mark.asyncio
    async def test_generate_image(self):
        body = {"data": [{"url": "https://img.test/1.png", "revised_prompt": "A fluffy cat"}]}
        client = RecordingClient(vendor_response(200, body))

        result = await OpenAIAdapter(api_key="sk-test", client=client).generate_image("a cat")

        assert result.urls == ["https://img.test/1.png"]
        assert result.model == "dall-e-3"
        assert result.metadata == {"revised_prompt": "A fluffy cat"}
        _, url, kwargs = client.calls[0]
        assert url == "https://api.openai.com/v1/images/generations"
        assert kwargs["json"] == {
            "model": "dall-e-3",
            "prompt": "a cat",
            "n": 1,
            "size": "1024x1024",
            "style": "vivid",
            "quality": "standard",
        }

    @pytest.mark.asyncio
    async def test_transcribe_uses_multipart(self):
        client = RecordingClient(vendor_response(200, {"text": "hello world"}))

        result = await OpenAIAdapter(api_key="sk-test", client=client).transcribe(
            b"audio-bytes", filename="clip.webm", language="fr"
        )

        assert result.content == "hello world"
        assert result.model == "whisper-1"
        assert result.metadata["language"] == "fr"
        _, url, kwargs = client.calls[0]
        assert url == "https://api.openai.com/v1/audio/transcriptions"
        assert kwargs["data"] == {"model": "whisper-1", "language": "fr"}
        assert kwargs["files"] == {"file": ("clip.webm", b"audio-bytes")}
        assert "Content-Type" not in kwargs["headers"]
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"

    @pytest.mark.asyncio
    async def test_speech_returns_data_uri(self):
        client = RecordingClient(vendor_response(200, content=b"\xff\xfb"))

        result = await OpenAIAdapter(api_key="sk-test", client=client).synthesize_speech("Hi")

        assert result.urls == ["data:audio/mpeg;base64,//s="]
        assert client.calls[0][2]["json"] == {"model": "tts-1", "input": "Hi", "voice": "alloy"}


class TestTogetherImages:
    @pytest.mark.asyncio
    async def test_flux_defaults(self):
        client = RecordingClient(vendor_response(200, {"data": [{"url": "https://img.test/flux.png"}]}))

        result = await TogetherAdapter(api_key="tg-key", client=client).generate_image("a fox", n=2)

        assert result.urls == ["https://img.test/flux.png"]
        assert client.calls[0][2]["json"] == {
            "model": settings.router.default_image_model,
            "prompt": "a fox",
            "size": "1024x1024",
            "n": 2,
        }

    @pytest.mark.asyncio
    async def test_bare_image_url(self):
        client = RecordingClient(vendor_response(200, {"image_url": "https://img.test/legacy.png"}))
        result = await TogetherAdapter(api_key="tg-key", client=client).generate_image("a fox")
        assert result.urls == ["https://img.test/legacy.png"]


class TestAIMLVideo:
    @pytest.mark.asyncio
    async def test_queued_job_is_processing(self):
        client = RecordingClient(vendor_response(200, {"id": "gen-1", "status": "queued"}))

        result = await AIMLAdapter(api_key="aiml", client=client).generate_video(
            "A sunrise", image_url="https://img.test/start.png", aspect_ratio="9:16", seed=7
        )

        assert result.status == "processing"
        assert result.job_id == "gen-1"
        assert result.urls == []
        assert result.metadata == {"duration": 5, "input_image_provided": True}
        _, url, kwargs = client.calls[0]
        assert url == "https://api.aimlapi.com/v1/video/generations"
        assert kwargs["json"] == {
            "model": settings.router.default_video_model,
            "prompt": "A sunrise",
            "duration": 5,
            "ratio": "9:16",
            "seed": 7,
            "watermark": False,
            "image_url": "https://img.test/start.png",
        }

    @pytest.mark.asyncio
    async def test_finished_video(self):
        body = {"id": "gen-2", "status": "completed", "data": {"url": "https://vid.test/out.mp4"}}
        client = RecordingClient(vendor_response(200, body))

        result = await AIMLAdapter(api_key="aiml", client=client).generate_video("A sunrise")

        assert result.urls == ["https://vid.test/out.mp4"]
        assert result.status == "completed"
        assert "image_url" not in client.calls[0][2]["json"]


class TestReplicate:
    def _adapter(self, client, max_polls=3):
        return ReplicateAdapter(api_key="r8-key", client=client, poll_interval_s=0, max_polls=max_polls)

    @pytest.mark.asyncio
    async def test_prediction_is_polled_until_succeeded(self):
        get_url = "https://api.replicate.com/v1/predictions/p1"
        client = RecordingClient(
            vendor_response(201, {"id": "p1", "status": "starting", "urls": {"get": get_url}}),
            vendor_response(200, {"id": "p1", "status": "processing", "urls": {"get": get_url}}),
            vendor_response(200, {"id": "p1", "status": "succeeded", "output": ["https://img.test/r.png"]}),
        )

        result = await self._adapter(client).generate_image("a lighthouse", size="1024x768")

        assert result.urls == ["https://img.test/r.png"]
        assert result.job_id == "p1"
        assert [(m, u) for m, u, _ in client.calls] == [
            ("POST", "https://api.replicate.com/v1/models/stability-ai/sdxl/predictions"),
            ("GET", get_url),
            ("GET", get_url),
        ]
        assert client.calls[0][2]["json"] == {
            "input": {"prompt": "a lighthouse", "num_outputs": 1, "width": 1024, "height": 768}
        }
        assert client.calls[0][2]["headers"]["Authorization"] == "Token r8-key"

    @pytest.mark.asyncio
    async def test_versioned_model(self):
        client = RecordingClient(
            vendor_response(201, {"id": "p2", "status": "succeeded", "output": "https://img.test/one.png"})
        )

        result = await self._adapter(client).generate_image("a lighthouse", model="owner/model:abc123")

        assert result.urls == ["https://img.test/one.png"]
        _, url, kwargs = client.calls[0]
        assert url == "https://api.replicate.com/v1/predictions"
        assert kwargs["json"]["version"] == "abc123"

    @pytest.mark.asyncio
    async def test_too_many_polls_times_out(self):
        client = RecordingClient(
            vendor_response(201, {"id": "p3", "status": "starting"}),
            vendor_response(200, {"id": "p3", "status": "processing"}),
        )

        with pytest.raises(AdapterTimeoutError):
            await self._adapter(client, max_polls=1).generate_image("a lighthouse")
        assert client.calls[1][1] == "https://api.replicate.com/v1/predictions/p3"

    @pytest.mark.asyncio
    async def test_failed_prediction(self):
        client = RecordingClient(vendor_response(201, {"id": "p4", "status": "failed", "error": "NSFW"}))

        with pytest.raises(VendorError) as exc_info:
            await self._adapter(client).generate_image("a lighthouse")

        assert exc_info.value.message == "Replicate image generation failed: prediction failed"
        assert exc_info.value.details["prediction_error"] == "NSFW"

    @pytest.mark.asyncio
    async def test_prediction_without_id(self):
        client = RecordingClient(vendor_response(201, {"status": "starting"}))
        with pytest.raises(VendorError, match="prediction without id"):
            await self._adapter(client).generate_image("a lighthouse")

    @pytest.mark.asyncio
    async def test_music(self):
        client = RecordingClient(
            vendor_response(201, {"id": "m1", "status": "succeeded", "output": "https://audio.test/m.mp3"})
        )

        result = await self._adapter(client).generate_music("late night", genre="jazz", mood="mellow", duration=20)

        assert result.urls == ["https://audio.test/m.mp3"]
        assert result.title == "late night"
        assert client.calls[0][1] == "https://api.replicate.com/v1/models/meta/musicgen/predictions"
        assert client.calls[0][2]["json"]["input"] == {
            "prompt": "jazz mellow: late night",
            "duration": 20,
            "output_format": "mp3",
        }


class TestElevenLabs:
    @pytest.mark.asyncio
    async def test_speech(self):
        client = RecordingClient(
            vendor_response(200, content=b"\xff\xfb", headers={"content-type": "audio/mpeg"})
        )

        result = await ElevenLabsAdapter(api_key="el-key", client=client).synthesize_speech("Hello")

        assert result.urls == ["data:audio/mpeg;base64,//s="]
        assert result.metadata == {"voice": settings.router.default_elevenlabs_voice, "bytes": 2}
        _, url, kwargs = client.calls[0]
        voice = settings.router.default_elevenlabs_voice
        assert url == f"https://api.elevenlabs.io/v1/text-to-speech/{voice}/stream"
        assert kwargs["headers"]["xi-api-key"] == "el-key"
        assert kwargs["headers"]["Accept"] == "audio/mpeg"
        assert kwargs["json"]["model_id"] == DEFAULT_TTS_MODEL
        assert kwargs["json"]["text"] == "Hello"

    @pytest.mark.asyncio
    async def test_empty_audio_has_no_url(self):
        client = RecordingClient(vendor_response(200, content=b""))
        result = await ElevenLabsAdapter(api_key="el-key", client=client).synthesize_speech("Hello", voice="v1")
        assert result.urls == []


class TestHeyGen:
    @pytest.mark.asyncio
    async def test_generate_video_returns_job(self):
        client = RecordingClient(vendor_response(200, {"error": None, "data": {"video_id": "vid-1"}}))

        result = await HeyGenAdapter(api_key="hg-key", client=client).generate_video("Welcome to OneAI")

        assert result.status == "processing"
        assert result.job_id == "vid-1"
        _, url, kwargs = client.calls[0]
        assert url == "https://api.heygen.com/v2/video/generate"
        assert kwargs["headers"]["X-API-KEY"] == "hg-key"
        video_input = kwargs["json"]["video_inputs"][0]
        assert video_input["character"]["avatar_id"] == DEFAULT_AVATAR_ID
        assert video_input["voice"]["input_text"] == "Welcome to OneAI"

    @pytest.mark.asyncio
    async def test_generate_video_without_id(self):
        client = RecordingClient(vendor_response(200, {"data": {}}))
        with pytest.raises(VendorError, match="no video_id"):
            await HeyGenAdapter(api_key="hg-key", client=client).generate_video("hi")

    @pytest.mark.asyncio
    async def test_completed_status(self):
        body = {
            "data": {
                "status": "completed",
                "video_url": "https://vid.test/v.mp4",
                "thumbnail_url": "https://vid.test/t.jpg",
                "progress": 100,
            }
        }
        client = RecordingClient(vendor_response(200, body))

        status = await HeyGenAdapter(api_key="hg-key", client=client).video_status("vid-1")

        assert status == {
            "video_id": "vid-1",
            "status": "completed",
            "video_url": "https://vid.test/v.mp4",
            "thumbnail_url": "https://vid.test/t.jpg",
            "progress": 100,
            "error_message": None,
        }
        method, url, kwargs = client.calls[0]
        assert (method, url) == ("GET", "https://api.heygen.com/v1/video_status.get")
        assert kwargs["params"] == {"video_id": "vid-1"}

    @pytest.mark.asyncio
    async def test_pending_status_hides_urls(self):
        body = {"data": {"status": "pending", "video_url": "https://vid.test/partial.mp4"}}
        client = RecordingClient(vendor_response(200, body))

        status = await HeyGenAdapter(api_key="hg-key", client=client).video_status("vid-1")

        assert status["status"] == "processing"
        assert status["video_url"] is None
        assert status["progress"] == 0

    @pytest.mark.parametrize(
        "raw,mapped",
        [
            ("completed", "completed"),
            ("processing", "processing"),
            ("pending", "processing"),
            ("failed", "failed"),
            ("error", "failed"),
            ("waiting", "processing"),
            (None, "processing"),
        ],
    )
    def test_status_mapping(self, raw, mapped):
        assert map_video_status(raw) == mapped

    @pytest.mark.asyncio
    async def test_catalog_listing_shapes(self):
        client = RecordingClient(
            vendor_response(200, {"data": {"voices": [{"voice_id": "v1"}, "junk"]}}),
            vendor_response(200, {"data": [{"avatar_id": "a1"}]}),
        )
        adapter = HeyGenAdapter(api_key="hg-key", client=client)

        assert await adapter.list_voices() == [{"voice_id": "v1"}]
        assert await adapter.list_avatars() == [{"avatar_id": "a1"}]
        assert [u for _, u, _ in client.calls] == [
            "https://api.heygen.com/v2/voices",
            "https://api.heygen.com/v2/avatars",
        ]


class TestSuno:
    @pytest.mark.asyncio
    async def test_task_is_processing(self):
        client = RecordingClient(vendor_response(200, {"code": 200, "data": {"taskId": "task-9"}}))

        result = await SunoAdapter(api_key="suno-key", client=client).generate_music(
            "calm piano", genre="classical", mood="calm"
        )

        assert result.status == "processing"
        assert result.job_id == "task-9"
        assert result.title == "calm piano"
        _, url, kwargs = client.calls[0]
        assert url == "https://api.sunoapi.org/api/v1/generate"
        assert kwargs["headers"]["Authorization"] == "Bearer suno-key"
        assert kwargs["json"]["style"] == "classical, calm"
        assert kwargs["json"]["customMode"] is True

    @pytest.mark.asyncio
    async def test_immediate_audio(self):
        body = {"data": {"audio_url": "https://audio.test/s.mp3", "taskId": "task-1"}}
        client = RecordingClient(vendor_response(200, body))

        result = await SunoAdapter(api_key="suno-key", client=client).generate_music("calm piano")

        assert result.urls == ["https://audio.test/s.mp3"]
        assert result.status == "completed"

    @pytest.mark.asyncio
    async def test_no_task_and_no_audio(self):
        client = RecordingClient(vendor_response(200, {"code": 200, "data": {}}))
        with pytest.raises(VendorError, match="no task id or audio"):
            await SunoAdapter(api_key="suno-key", client=client).generate_music("calm piano")
