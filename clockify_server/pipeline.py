"""Command -> validated time entries."""
import logging
from datetime import datetime

import httpx

from .clockify import fetch_catalog
from .completion import CompletionClient
from .config import Settings
from .entries import TimeEntry, validate_entries
from .errors import FormatError
from .prompts import build_system_prompt
from .temporal import build_temporal_context

logger = logging.getLogger(__name__)


async def parse_command(
    command: str,
    settings: Settings,
    now: datetime | None = None,
    clockify_token: str | None = None,
    clockify_transport: httpx.AsyncBaseTransport | None = None,
    openai_http_client: httpx.AsyncClient | None = None,
) -> list[TimeEntry]:
    """Run one parse chain. Errors from any step propagate unchanged."""
    if not command or not command.strip():
        raise FormatError("Command is empty", command)

    tz = settings.tzinfo
    async with CompletionClient(settings, openai_http_client) as completion:
        context = build_temporal_context(now, tz)
        catalog = await fetch_catalog(settings, clockify_token or settings.clockify_api_key, clockify_transport)
        system_prompt = build_system_prompt(context, catalog)
        logger.info("Parsing command %r against %d projects", command, len(catalog))

        raw = await completion.complete(system_prompt, command.strip())
    entries = validate_entries(raw, context.now, tz)
    logger.info("Parsed %d entries", len(entries))
    return entries
