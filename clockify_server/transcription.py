"""Whisper transcription of a recorded command."""
import logging

import httpx
import openai

from .completion import openai_client
from .config import Settings
from .errors import ServiceError

logger = logging.getLogger(__name__)

WHISPER_MODEL = "whisper-1"


class Transcriber:
    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self.client = openai_client(settings, http_client)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        await self.client.close()

    async def transcribe(self, audio: bytes, filename: str = "audio.wav") -> str:
        try:
            transcript = await self.client.audio.transcriptions.create(
                model=WHISPER_MODEL,
                file=(filename, audio),
                language="en",
                response_format="text",
            )
        except openai.APIStatusError as e:
            raise ServiceError("openai.audio.transcriptions", e.status_code, e.response.text) from e
        except openai.APIConnectionError as e:
            raise ServiceError("openai.audio.transcriptions", body=str(e)) from e

        text = transcript if isinstance(transcript, str) else getattr(transcript, "text", "")
        text = (text or "").strip()
        if not text:
            raise ServiceError("openai.audio.transcriptions", body="No transcript received from Whisper")
        logger.debug("Transcript: %s", text)
        return text
