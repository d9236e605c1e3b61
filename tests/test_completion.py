import asyncio

import httpx
import pytest

from clockify_server.completion import CompletionClient
from clockify_server.config import Settings
from clockify_server.errors import ConfigError, ServiceError
from clockify_server.transcription import Transcriber

from conftest import FakeOpenAI


def test_returns_top_choice_and_sends_expected_request(settings):
    fake = FakeOpenAI(content='[{"description": "x"}]')
    client = CompletionClient(settings, fake.client())

    text = asyncio.run(client.complete("SYSTEM", "Log 2 hours"))

    assert text == '[{"description": "x"}]'
    assert len(fake.requests) == 1
    assert fake.requests[0].url.path.endswith("/chat/completions")
    assert fake.requests[0].headers["Authorization"] == "Bearer sk-test"
    payload = fake.last_payload
    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == 0.1
    assert payload["max_tokens"] == 2000
    assert payload["messages"] == [
        {"role": "system", "content": "SYSTEM"},
        {"role": "user", "content": "Log 2 hours"},
    ]


@pytest.mark.parametrize("status", [400, 401, 429, 500])
def test_non_success_status_is_a_service_error_without_retry(settings, status):
    fake = FakeOpenAI(status=status, body='{"error": "nope"}')
    client = CompletionClient(settings, fake.client())

    with pytest.raises(ServiceError) as exc:
        asyncio.run(client.complete("SYSTEM", "cmd"))

    assert exc.value.status == status
    assert "nope" in exc.value.body
    assert exc.value.call == "openai.chat.completions"
    assert len(fake.requests) == 1


@pytest.mark.parametrize("content", ["", "   ", "\n\t "])
def test_empty_content_is_a_service_error(settings, content):
    fake = FakeOpenAI(content=content)
    with pytest.raises(ServiceError, match="No response from OpenAI"):
        asyncio.run(CompletionClient(settings, fake.client()).complete("SYSTEM", "cmd"))


def test_connection_failure_is_a_service_error(settings):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    with pytest.raises(ServiceError) as exc:
        asyncio.run(CompletionClient(settings, http_client).complete("SYSTEM", "cmd"))
    assert exc.value.status is None


def test_context_manager_closes_http_client(settings):
    fake = FakeOpenAI(content="[]")
    http_client = fake.client()

    async def use():
        async with CompletionClient(settings, http_client) as client:
            return await client.complete("SYSTEM", "cmd")

    assert asyncio.run(use()) == "[]"
    assert http_client.is_closed


def test_missing_api_key_is_a_config_error():
    with pytest.raises(ConfigError):
        CompletionClient(Settings(openai_api_key=None))


class TestTranscriber:
    def test_returns_stripped_transcript(self, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text="  Log two hours coding\n", headers={"content-type": "text/plain"})

        transcriber = Transcriber(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        text = asyncio.run(transcriber.transcribe(b"RIFF....WAVE", "audio.wav"))

        assert text == "Log two hours coding"
        assert seen[0].url.path.endswith("/audio/transcriptions")
        assert b"whisper-1" in seen[0].content

    def test_blank_transcript_is_a_service_error(self, settings):
        def handler(request):
            return httpx.Response(200, text="   ", headers={"content-type": "text/plain"})

        transcriber = Transcriber(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(ServiceError, match="No transcript"):
            asyncio.run(transcriber.transcribe(b"data"))

    def test_failure_status(self, settings):
        def handler(request):
            return httpx.Response(413, text="file too large")

        transcriber = Transcriber(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(ServiceError) as exc:
            asyncio.run(transcriber.transcribe(b"data"))
        assert exc.value.status == 413
        assert exc.value.body == "file too large"

    def test_missing_api_key(self):
        with pytest.raises(ConfigError):
            Transcriber(Settings())

    def test_context_manager_closes_http_client(self, settings):
        def handler(request):
            return httpx.Response(200, text="Log an hour", headers={"content-type": "text/plain"})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        async def use():
            async with Transcriber(settings, http_client) as transcriber:
                return await transcriber.transcribe(b"data")

        assert asyncio.run(use()) == "Log an hour"
        assert http_client.is_closed
