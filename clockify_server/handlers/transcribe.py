from fastapi import APIRouter, Depends, HTTPException, Request
import httpx

from ..config import Settings
from ..dependencies import openai_http_client, settings_dependency
from ..transcription import Transcriber

router = APIRouter()

EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/ogg": "ogg",
}

@router.post("/transcribe")
async def transcribe(
    request: Request,
    settings: Settings = Depends(settings_dependency),
    http_client: httpx.AsyncClient | None = Depends(openai_http_client),
):
    """Transcribe a raw audio body into command text."""
    audio = await request.body()
    if not audio:
        raise HTTPException(400, "Empty audio body")
    content_type = request.headers.get("content-type", "").split(";")[0].strip()
    filename = f"audio.{EXTENSIONS.get(content_type, 'wav')}"
    async with Transcriber(settings, http_client) as transcriber:
        transcript = await transcriber.transcribe(audio, filename)
    return {"transcript": transcript}
