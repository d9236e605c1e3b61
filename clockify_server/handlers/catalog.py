from fastapi import APIRouter, Depends
import httpx

from ..clockify import fetch_catalog
from ..config import Settings
from ..dependencies import clockify_transport, settings_dependency

router = APIRouter()

@router.get("/catalog")
async def get_catalog(
    settings: Settings = Depends(settings_dependency),
    transport: httpx.AsyncBaseTransport | None = Depends(clockify_transport),
):
    """Projects and their tasks for the configured Clockify token."""
    return {"projects": await fetch_catalog(settings, settings.clockify_api_key, transport)}
