from fastapi import APIRouter, Depends
from pydantic import BaseModel
import httpx

from ..clockify import submit_time_entries
from ..config import Settings
from ..dependencies import clockify_transport, settings_dependency
from ..entries import TimeEntry

router = APIRouter()

class SubmitEntriesPayload(BaseModel):
    entries: list[TimeEntry]
    clockify_token: str | None = None

@router.post("/time_entries")
async def create_time_entries(
    payload: SubmitEntriesPayload,
    settings: Settings = Depends(settings_dependency),
    transport: httpx.AsyncBaseTransport | None = Depends(clockify_transport),
):
    token = payload.clockify_token or settings.clockify_api_key
    results = await submit_time_entries(settings, token, payload.entries, transport)
    return {
        "status": "success",
        "submitted": len(results),
        "results": results,
    }
