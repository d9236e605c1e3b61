"""Extraction and validation of time entries from language-model output.

The model call is not reproducible, so everything downstream of it is a pure
function of the returned text. A single bad entry fails the whole batch:
submitting part of what the user asked for is worse than an explicit error.
"""
import json
import logging
from datetime import datetime, tzinfo
from typing import Literal

from dateutil import parser
from pydantic import BaseModel

from .errors import FormatError

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


class TimeEntry(BaseModel):
    project:     str | None = None
    task:        str | None = None
    description: str
    start:       datetime
    end:         datetime
    source:      Literal["nlp", "calendar"] = "nlp"


def extract_entries(raw_text: str):
    """Return the first JSON array embedded in ``raw_text``, else the whole text parsed."""
    pos = raw_text.find("[")
    while pos != -1:
        try:
            value, _ = _decoder.raw_decode(raw_text, pos)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, list):
                return value
        pos = raw_text.find("[", pos + 1)

    try:
        return json.loads(raw_text)
    except json.JSONDecodeError:
        raise FormatError("Could not parse AI response as structured data", raw_text) from None


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def _parse_timestamp(value, tz: tzinfo | None) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"not a string: {value!r}")
    dt = parser.isoparse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def _optional_name(entry: dict, key: str) -> str | None:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FormatError(f"Entry {key} must be a string or null", entry)
    return value.strip() or None


def validate_entry(entry, now: datetime, tz: tzinfo | None = None) -> TimeEntry:
    tz = tz or now.tzinfo
    if not isinstance(entry, dict):
        raise FormatError("Entry is not an object", entry)

    description = entry.get("description")
    if not isinstance(description, str) or not description.strip():
        raise FormatError("Entry missing description", entry)
    if not entry.get("start") or not entry.get("end"):
        raise FormatError("Entry missing start or end time", entry)

    description = capitalize_first(description)

    try:
        start = _parse_timestamp(entry["start"], tz)
        end = _parse_timestamp(entry["end"], tz)
    except (ValueError, OverflowError):
        raise FormatError("Invalid date format in entry", entry) from None

    year = now.year
    if start.astimezone(tz).year != year or end.astimezone(tz).year != year:
        raise FormatError("Dates must be in current year", entry)
    if start >= end:
        raise FormatError("Start time must be before end time", entry)

    return TimeEntry(
        project=_optional_name(entry, "project"),
        task=_optional_name(entry, "task"),
        description=description,
        start=start,
        end=end,
    )


def validate_entries(raw_text: str, now: datetime, tz: tzinfo | None = None) -> list[TimeEntry]:
    """Parse model output into entries; raises FormatError on the first violation."""
    entries = extract_entries(raw_text)
    if not isinstance(entries, list):
        raise FormatError("Response is not an array", raw_text)
    validated = [validate_entry(entry, now, tz) for entry in entries]
    logger.debug("Validated %d entries", len(validated))
    return validated
