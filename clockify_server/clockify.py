"""Utility functions for interacting with the Clockify API."""
import asyncio
import logging

import httpx
from pydantic import BaseModel, Field

from .config import Settings
from .entries import TimeEntry
from .errors import ConfigError, ServiceError

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class Task(BaseModel):
    id:   str
    name: str


class Project(BaseModel):
    id:          str
    name:        str
    client_name: str | None = Field(None, alias="clientName")
    tasks:       list[Task] = []

    model_config = {"populate_by_name": True, "extra": "ignore"}


def clockify_client(settings: Settings, token: str, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.clockify_base_url,
        headers=settings.clockify_headers(token),
        timeout=settings.http_timeout,
        transport=transport,
    )


async def _send(client: httpx.AsyncClient, method: str, path: str, call: str, **kwargs) -> httpx.Response:
    try:
        return await client.request(method, path, **kwargs)
    except httpx.HTTPError as e:
        raise ServiceError(call, body=str(e)) from e


async def _get_json(client: httpx.AsyncClient, path: str, call: str, params: dict | None = None):
    r = await _send(client, "GET", path, call, params=params)
    if not r.is_success:
        raise ServiceError(call, r.status_code, r.text)
    return r.json()


async def _get_paginated(client: httpx.AsyncClient, path: str, call: str) -> list:
    """Clockify pages list endpoints; loop until a short page comes back."""
    items: list = []
    page = 1
    while True:
        batch = await _get_json(client, path, call, params={"page": page, "page-size": PAGE_SIZE})
        items.extend(batch)
        if len(batch) < PAGE_SIZE:
            break
        page += 1
    return items


async def validate_token(client: httpx.AsyncClient) -> bool:
    try:
        r = await client.get("/user")
    except httpx.HTTPError as e:
        logger.warning("Token validation error: %s", e)
        return False
    return r.is_success


async def list_workspaces(client: httpx.AsyncClient) -> list[dict]:
    return await _get_json(client, "/workspaces", "clockify.list_workspaces")


async def list_projects(client: httpx.AsyncClient, workspace_id: str) -> list[Project]:
    raw = await _get_paginated(client, f"/workspaces/{workspace_id}/projects", "clockify.list_projects")
    return [Project.model_validate(p) for p in raw]


async def list_tasks(client: httpx.AsyncClient, workspace_id: str, project_id: str) -> list[Task]:
    raw = await _get_paginated(
        client, f"/workspaces/{workspace_id}/projects/{project_id}/tasks", "clockify.list_tasks"
    )
    return [Task.model_validate(t) for t in raw]


async def _with_tasks(client: httpx.AsyncClient, workspace_id: str, project: Project) -> Project:
    try:
        tasks = await list_tasks(client, workspace_id, project.id)
    except ServiceError as e:
        logger.warning("Failed to fetch tasks for project %s: %s", project.name, e)
        tasks = []
    return project.model_copy(update={"tasks": tasks})


async def fetch_projects_with_tasks(client: httpx.AsyncClient, workspace_id: str) -> list[Project]:
    """All projects in the workspace; a failed task fetch leaves that project task-less."""
    projects = await list_projects(client, workspace_id)
    return list(await asyncio.gather(*(_with_tasks(client, workspace_id, p) for p in projects)))


async def fetch_catalog(
    settings: Settings,
    token: str | None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, list[str]]:
    """Project name -> task names for the first workspace, or {} without a usable token."""
    if not token:
        logger.debug("No Clockify token, composing prompt without projects")
        return {}

    async with clockify_client(settings, token, transport) as client:
        if not await validate_token(client):
            logger.warning("Clockify token rejected, composing prompt without projects")
            return {}
        workspaces = await list_workspaces(client)
        if not workspaces:
            return {}
        projects = await fetch_projects_with_tasks(client, workspaces[0]["id"])

    catalog: dict[str, list[str]] = {}
    for project in projects:
        catalog.setdefault(project.name, [t.name for t in project.tasks])
    logger.debug("Fetched catalog with %d projects", len(catalog))
    return catalog


def _resolve(entry: TimeEntry, projects: dict[str, Project]) -> tuple[str | None, str | None]:
    if not entry.project:
        return None, None
    project = projects.get(entry.project.lower())
    if project is None:
        logger.warning("Project %r not found, submitting without project", entry.project)
        return None, None
    if not entry.task:
        return project.id, None
    for task in project.tasks:
        if task.name.lower() == entry.task.lower():
            return project.id, task.id
    logger.warning("Task %r not found in project %r", entry.task, entry.project)
    return project.id, None


async def submit_time_entries(
    settings: Settings,
    token: str | None,
    entries: list[TimeEntry],
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict]:
    """Post each entry to the first workspace, resolving project/task names to ids."""
    if not token:
        raise ConfigError("Clockify API key not configured")

    results = []
    async with clockify_client(settings, token, transport) as client:
        workspaces = await list_workspaces(client)
        if not workspaces:
            raise ServiceError("clockify.list_workspaces", body="No workspaces found")
        workspace_id = workspaces[0]["id"]

        projects: dict[str, Project] = {}
        for project in await fetch_projects_with_tasks(client, workspace_id):
            # first project returned wins on duplicate names
            projects.setdefault(project.name.lower(), project)

        for entry in entries:
            project_id, task_id = _resolve(entry, projects)
            body = {
                "start":       entry.start.isoformat(),
                "end":         entry.end.isoformat(),
                "description": entry.description,
                "projectId":   project_id,
                "taskId":      task_id,
                "tagIds":      [],
            }
            logger.debug("Submitting time entry: %s", body)
            call = f"clockify.submit_time_entry({entry.description!r})"
            r = await _send(client, "POST", f"/workspaces/{workspace_id}/time-entries", call, json=body)
            if not r.is_success:
                raise ServiceError(call, r.status_code, r.text)
            results.append(r.json())
    return results
