from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import httpx

from ..config import Settings
from ..dependencies import graph_transport, settings_dependency
from ..meetings import CalendarEvent, convert_events_to_entries, fetch_week_events
from ..temporal import build_temporal_context

router = APIRouter()

class ImportMeetingsPayload(BaseModel):
    events: list[CalendarEvent] | None = None
    access_token: str | None = None
    default_project: str | None = None

@router.post("/import_meetings")
async def import_meetings(
    payload: ImportMeetingsPayload,
    settings: Settings = Depends(settings_dependency),
    transport: httpx.AsyncBaseTransport | None = Depends(graph_transport),
):
    """Convert calendar events (given inline, or this week's from Graph) into entries."""
    events = payload.events
    if events is None:
        if not payload.access_token:
            raise HTTPException(400, "Provide either events or a Graph access_token")
        week = build_temporal_context(tz=settings.tzinfo).week
        events = await fetch_week_events(settings, payload.access_token, week, transport)

    entries = convert_events_to_entries(events, payload.default_project)
    return {
        "status": "success",
        "count": len(entries),
        "entries": [e.model_dump(mode="json") for e in entries],
    }
