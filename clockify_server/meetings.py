"""
Calendar meeting import from Microsoft Graph.

Events are fetched with a bearer token obtained by the caller and turned into
time entries. The project is guessed from the meeting title; the task is left
for the language-model path or manual assignment.
"""
import logging
import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from dateutil import parser
from pydantic import BaseModel, Field

from .config import Settings
from .entries import TimeEntry
from .errors import ServiceError
from .temporal import WeekInfo

logger = logging.getLogger(__name__)

EVENT_FIELDS = "subject,start,end,location,attendees,organizer,isAllDay,showAs,responseStatus"

# Tried in order; the first pattern yielding a long enough candidate wins.
PROJECT_PATTERNS = [
    re.compile(r"\b([A-Z]{3,})\b", re.ASCII),  # acronyms like XMAP, ACME
    re.compile(r"\[(.*?)\]"),                   # [ProjectName]
    re.compile(r"-(.*?)-"),                     # -ProjectName-
]
PUNCTUATION = re.compile(r"[\[\]\-]")
MIN_PROJECT_LENGTH = 3


class EventTime(BaseModel):
    date_time: str = Field(..., alias="dateTime")
    time_zone: str | None = Field(None, alias="timeZone")

    model_config = {"populate_by_name": True}


class Location(BaseModel):
    display_name: str | None = Field(None, alias="displayName")

    model_config = {"populate_by_name": True}


class ResponseStatus(BaseModel):
    response: str | None = None


class CalendarEvent(BaseModel):
    subject:         str | None = None
    start:           EventTime
    end:             EventTime
    location:        Location | None = None
    is_all_day:      bool = Field(False, alias="isAllDay")
    show_as:         str | None = Field(None, alias="showAs")
    response_status: ResponseStatus | None = Field(None, alias="responseStatus")

    model_config = {"populate_by_name": True, "extra": "ignore"}


def is_billable_meeting(event: CalendarEvent) -> bool:
    if event.is_all_day:
        return False
    if event.show_as == "free":
        return False
    if event.response_status and event.response_status.response == "declined":
        return False
    return True


def extract_project(subject: str) -> str | None:
    for pattern in PROJECT_PATTERNS:
        match = pattern.search(subject)
        if match:
            candidate = PUNCTUATION.sub("", match.group(0)).strip()
            if len(candidate) >= MIN_PROJECT_LENGTH:
                return candidate
    return None


def event_time(value: EventTime) -> datetime:
    """Graph returns naive wall-clock strings plus a separate timeZone name."""
    dt = parser.isoparse(value.date_time)
    if dt.tzinfo is None:
        try:
            tz = ZoneInfo(value.time_zone) if value.time_zone else timezone.utc
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown event time zone %r, assuming UTC", value.time_zone)
            tz = timezone.utc
        dt = dt.replace(tzinfo=tz)
    return dt.astimezone(timezone.utc)


def convert_event(event: CalendarEvent, default_project: str | None = None) -> TimeEntry:
    subject = event.subject or "Meeting"
    project = extract_project(subject) or default_project
    description = subject

    if project and project in subject:
        description = PUNCTUATION.sub("", subject.replace(project, "", 1)).strip()
        if not description:
            description = "Meeting"

    if event.location and event.location.display_name:
        description += f" ({event.location.display_name})"

    return TimeEntry(
        project=project,
        task=None,
        description=description,
        start=event_time(event.start),
        end=event_time(event.end),
        source="calendar",
    )


def convert_events_to_entries(events: list[CalendarEvent], default_project: str | None = None) -> list[TimeEntry]:
    """Drop all-day, free and declined events, then convert the rest."""
    return [convert_event(e, default_project) for e in events if is_billable_meeting(e)]


async def fetch_week_events(
    settings: Settings,
    access_token: str,
    week: WeekInfo,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[CalendarEvent]:
    """Fetch the signed-in user's events for the given Monday-Sunday week."""
    start = f"{week.monday.isoformat()}T00:00:00.000Z"
    end = f"{week.sunday.isoformat()}T23:59:59.999Z"
    logger.info("Fetching calendar events from %s to %s", start, end)

    params = {
        "$filter": f"start/dateTime ge '{start}' and end/dateTime le '{end}'",
        "$select": EVENT_FIELDS,
        "$orderby": "start/dateTime",
    }
    headers = {"Authorization": f"Bearer {access_token}"}
    events: list[CalendarEvent] = []

    async with httpx.AsyncClient(headers=headers, timeout=settings.http_timeout, transport=transport) as client:
        url: str | None = f"{settings.graph_base_url}/me/events"
        while url:
            try:
                r = await client.get(url, params=params)
            except httpx.HTTPError as e:
                raise ServiceError("graph.list_events", body=str(e)) from e
            if not r.is_success:
                raise ServiceError("graph.list_events", r.status_code, r.text)
            data = r.json()
            events.extend(CalendarEvent.model_validate(e) for e in data.get("value", []))
            url = data.get("@odata.nextLink")
            # nextLink already carries the query
            params = None
    return events
