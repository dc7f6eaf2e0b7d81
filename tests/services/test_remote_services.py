import base64
import json

import httpx
import pytest

from kakuli.exceptions import EmptyGenerationError, RemoteServiceError
from kakuli.http_client import SharedHttpClient
from kakuli.retry_utils import RetryConfig
from kakuli.services import GeminiClient, UnsplashClient, WeatherClient, WikipediaClient, YouTubeClient

NO_WAIT = RetryConfig(max_attempts=2, base_delay=0.0, jitter=False)


class Recorder:
    """httpx.MockTransport handler that serves canned responses by host/path."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for prefix, response in self.routes.items():
            if str(request.url).startswith(prefix):
                return response(request) if callable(response) else response
        return httpx.Response(404, json={})


@pytest.fixture
def http_factory():
    async def _make(routes):
        recorder = Recorder(routes)
        client = SharedHttpClient(retry_config=NO_WAIT, transport=httpx.MockTransport(recorder))
        await client.start()
        return client, recorder

    return _make


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


# Gemini

@pytest.mark.asyncio
async def test_gemini_text(http_factory):
    http, rec = await http_factory({
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent":
            httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Hi!"}]}}]}),
    })
    reply = await GeminiClient(http, "k").generate_text("hello")

    assert reply == "Hi!"
    body = json.loads(rec.requests[0].content)
    assert body == {"contents": [{"parts": [{"text": "hello"}]}]}
    assert rec.requests[0].headers["x-goog-api-key"] == "k"
    assert "key=" not in str(rec.requests[0].url)
    await http.stop()


@pytest.mark.asyncio
async def test_gemini_text_without_candidates_is_empty(http_factory):
    http, _ = await http_factory({"https://generativelanguage": httpx.Response(200, json={})})
    assert await GeminiClient(http, "k").generate_text("hello") == ""
    await http.stop()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[], {"candidates": 3}, {"candidates": [{"content": {"parts": "text"}}]}])
async def test_gemini_text_with_malformed_body_is_empty(http_factory, body):
    http, _ = await http_factory({"https://generativelanguage": httpx.Response(200, json=body)})
    assert await GeminiClient(http, "k").generate_text("hello") == ""
    await http.stop()


@pytest.mark.asyncio
async def test_gemini_image_uses_image_key_and_decodes(http_factory):
    http, rec = await http_factory({
        "https://generativelanguage": httpx.Response(200, json={"candidates": [{"content": {"parts": [
            {"text": "here you go"},
            {"inlineData": {"mimeType": "image/png", "data": _b64(b"PNGDATA")}},
        ]}}]}),
    })
    image = await GeminiClient(http, "main", image_api_key="img").generate_image("a cat")

    assert image.data == b"PNGDATA"
    assert image.mimetype == "image/png"
    assert rec.requests[0].headers["x-goog-api-key"] == "img"
    body = json.loads(rec.requests[0].content)
    assert body["generationConfig"]["responseModalities"] == ["TEXT", "IMAGE"]
    await http.stop()


@pytest.mark.asyncio
async def test_gemini_image_without_inline_data(http_factory):
    http, _ = await http_factory({
        "https://generativelanguage": httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": "no"}]}}]}
        ),
    })
    with pytest.raises(EmptyGenerationError):
        await GeminiClient(http, "k").generate_image("a cat")
    await http.stop()


@pytest.mark.asyncio
async def test_gemini_speech_payload_and_audio(http_factory):
    http, rec = await http_factory({
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash-preview-tts":
            httpx.Response(200, json={"candidates": [{"content": {"parts": [
                {"inlineData": {"mimeType": "audio/L16;rate=24000", "data": _b64(b"\x01\x02")}}
            ]}}]}),
    })
    audio = await GeminiClient(http, "main", tts_api_key="tts").synthesize_speech("hi", "Orus")

    assert audio == b"\x01\x02"
    body = json.loads(rec.requests[0].content)
    assert body["generationConfig"]["responseModalities"] == ["AUDIO"]
    voice = body["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
    assert voice == {"voiceName": "Orus"}
    assert rec.requests[0].headers["x-goog-api-key"] == "tts"
    await http.stop()


@pytest.mark.asyncio
async def test_gemini_speech_without_audio_returns_none(http_factory):
    http, _ = await http_factory({"https://generativelanguage": httpx.Response(200, json={"candidates": []})})
    assert await GeminiClient(http, "k").synthesize_speech("hi", "Orus") is None
    await http.stop()


@pytest.mark.asyncio
async def test_gemini_without_key_fails_before_request(http_factory):
    http, rec = await http_factory({})
    with pytest.raises(RemoteServiceError):
        await GeminiClient(http, None).generate_text("hi")
    assert rec.requests == []
    await http.stop()


# Weather

@pytest.mark.asyncio
async def test_weather_report(http_factory):
    http, rec = await http_factory({
        "https://api.openweathermap.org/data/2.5/weather": httpx.Response(200, json={
            "main": {"temp": 21.5, "humidity": 40},
            "weather": [{"description": "clear sky"}],
        }),
    })
    report = await WeatherClient(http, "wkey").current("Paris")

    params = rec.requests[0].url.params
    assert params["q"] == "Paris" and params["units"] == "metric" and params["appid"] == "wkey"
    assert report.render() == (
        "🌤️ Weather in *Paris*\n🌡️ Temp: 21.5°C\n💧 Humidity: 40%\n🌍 Condition: clear sky"
    )
    await http.stop()


@pytest.mark.asyncio
async def test_weather_city_not_found(http_factory):
    http, _ = await http_factory({"https://api.openweathermap.org": httpx.Response(404, json={"cod": "404"})})
    with pytest.raises(RemoteServiceError) as exc_info:
        await WeatherClient(http, "wkey").current("Nowhere")
    assert exc_info.value.status_code == 404
    await http.stop()


@pytest.mark.asyncio
async def test_weather_missing_field(http_factory):
    http, _ = await http_factory({"https://api.openweathermap.org": httpx.Response(200, json={"main": {}})})
    with pytest.raises(RemoteServiceError, match="missing field"):
        await WeatherClient(http, "wkey").current("Paris")
    await http.stop()


# Wikipedia

@pytest.mark.asyncio
async def test_wikipedia_summary(http_factory):
    http, rec = await http_factory({
        "https://en.wikipedia.org/api/rest_v1/page/summary/": httpx.Response(
            200, json={"type": "standard", "title": "Ada Lovelace", "extract": "English mathematician."}
        ),
    })
    summary = await WikipediaClient(http, None).summary("Ada Lovelace")

    assert rec.requests[0].url.path.endswith("/Ada_Lovelace")
    assert summary.render("Ada Lovelace") == "📖 *Wikipedia: Ada Lovelace*\n\nEnglish mathematician."
    await http.stop()


@pytest.mark.asyncio
async def test_wikipedia_no_page(http_factory):
    http, _ = await http_factory({"https://en.wikipedia.org": httpx.Response(404, json={"type": "not_found"})})
    with pytest.raises(RemoteServiceError):
        await WikipediaClient(http, None).summary("zzzzqqq")
    await http.stop()


# YouTube

@pytest.mark.asyncio
async def test_youtube_top_video(http_factory):
    http, rec = await http_factory({
        "https://www.googleapis.com/youtube/v3/search": httpx.Response(200, json={"items": [{
            "id": {"videoId": "abc123"},
            "snippet": {"title": "Lo-fi beats", "description": "d" * 150},
        }]}),
    })
    video = await YouTubeClient(http, "ykey").top_video("lofi")

    params = rec.requests[0].url.params
    assert params["type"] == "video" and params["part"] == "snippet" and params["key"] == "ykey"
    text = video.render("lofi")
    assert "*Lo-fi beats*" in text
    assert "d" * 100 + "..." in text and "d" * 101 not in text
    assert text.endswith("https://www.youtube.com/watch?v=abc123")
    await http.stop()


@pytest.mark.asyncio
async def test_youtube_no_results(http_factory):
    http, _ = await http_factory({"https://www.googleapis.com": httpx.Response(200, json={"items": []})})
    with pytest.raises(RemoteServiceError):
        await YouTubeClient(http, "ykey").top_video("lofi")
    await http.stop()


# Unsplash

@pytest.mark.asyncio
async def test_unsplash_search_download_and_track(http_factory):
    http, rec = await http_factory({
        "https://api.unsplash.com/search/photos": httpx.Response(200, json={"results": [{
            "urls": {"regular": "https://images.unsplash.com/photo-1"},
            "links": {"download_location": "https://api.unsplash.com/photos/1/download"},
            "user": {"name": "Jane Doe"},
        }]}),
        "https://images.unsplash.com/photo-1": httpx.Response(200, content=b"JPEGDATA"),
        "https://api.unsplash.com/photos/1/download": httpx.Response(200, json={"url": "x"}),
    })
    client = UnsplashClient(http, "ukey")
    photo = await client.first_photo("mountains")
    data = await client.download(photo)

    assert data == b"JPEGDATA"
    assert photo.photographer == "Jane Doe"
    assert rec.requests[0].url.params["per_page"] == "1"
    assert rec.requests[0].headers["Authorization"] == "Client-ID ukey"
    assert [str(r.url) for r in rec.requests[1:]] == [
        "https://images.unsplash.com/photo-1",
        "https://api.unsplash.com/photos/1/download",
    ]
    await http.stop()


@pytest.mark.asyncio
async def test_unsplash_no_results(http_factory):
    http, _ = await http_factory({"https://api.unsplash.com": httpx.Response(200, json={"results": []})})
    with pytest.raises(RemoteServiceError):
        await UnsplashClient(http, "ukey").first_photo("qwertyuiop")
    await http.stop()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[], "just a string", {"extract": 42}, {"type": "disambiguation", "extract": "x"}])
async def test_wikipedia_unusable_body_is_remote_service_error(http_factory, body):
    http, _ = await http_factory({"https://en.wikipedia.org": httpx.Response(200, json=body)})
    with pytest.raises(RemoteServiceError):
        await WikipediaClient(http, None).summary("Python")
    await http.stop()
