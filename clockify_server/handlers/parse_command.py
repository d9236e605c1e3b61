from fastapi import APIRouter, Depends
from pydantic import BaseModel
import httpx

from ..config import Settings
from ..dependencies import clockify_transport, openai_http_client, settings_dependency
from ..pipeline import parse_command

router = APIRouter()

class ParseCommandPayload(BaseModel):
    command: str
    clockify_token: str | None = None

@router.post("/parse_command")
async def parse_command_endpoint(
    payload: ParseCommandPayload,
    settings: Settings = Depends(settings_dependency),
    transport: httpx.AsyncBaseTransport | None = Depends(clockify_transport),
    http_client: httpx.AsyncClient | None = Depends(openai_http_client),
):
    entries = await parse_command(
        payload.command,
        settings,
        clockify_token=payload.clockify_token,
        clockify_transport=transport,
        openai_http_client=http_client,
    )
    return {
        "status": "success",
        "count": len(entries),
        "entries": [e.model_dump(mode="json") for e in entries],
    }
