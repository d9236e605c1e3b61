"""
Shared pytest fixtures.
Outbound HTTP (Clockify, Graph, OpenAI) is faked with httpx.MockTransport.
"""
import json
from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest

from clockify_server.config import Settings

PACIFIC = ZoneInfo("America/Los_Angeles")
API_PREFIX = "/api/v1"


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        clockify_api_key="clockify-test",
        timezone="America/Los_Angeles",
    )


@pytest.fixture
def now():
    """Monday 2025-01-13, 2:07 PM Pacific."""
    return datetime(2025, 1, 13, 14, 7, 0, tzinfo=PACIFIC)


class FakeClockify:
    """In-memory stand-in for the Clockify REST API."""

    def __init__(self, projects=None, tasks=None, valid_token="clockify-test", failing_tasks=()):
        self.projects = projects if projects is not None else []
        self.tasks = tasks or {}
        self.valid_token = valid_token
        self.failing_tasks = set(failing_tasks)
        self.workspaces = [{"id": "ws1", "name": "Main"}, {"id": "ws2", "name": "Other"}]
        self.submitted = []
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("X-Api-Key") != self.valid_token:
            return httpx.Response(401, json={"message": "Unauthorized"})

        path = request.url.path.removeprefix(API_PREFIX)
        parts = path.strip("/").split("/")
        page = int(request.url.params.get("page", "1"))
        size = int(request.url.params.get("page-size", "50"))

        if path == "/user":
            return httpx.Response(200, json={"id": "u1", "name": "Test User"})
        if path == "/workspaces":
            return httpx.Response(200, json=self.workspaces)
        if parts[-1] == "projects":
            return httpx.Response(200, json=self.projects[(page - 1) * size: page * size])
        if parts[-1] == "tasks":
            project_id = parts[3]
            if project_id in self.failing_tasks:
                return httpx.Response(500, text="boom")
            tasks = self.tasks.get(project_id, [])
            return httpx.Response(200, json=tasks[(page - 1) * size: page * size])
        if parts[-1] == "time-entries" and request.method == "POST":
            body = json.loads(request.content)
            self.submitted.append(body)
            return httpx.Response(201, json={"id": f"te{len(self.submitted)}", **body})
        return httpx.Response(404, text=f"no route {path}")


@pytest.fixture
def clockify():
    return FakeClockify(
        projects=[
            {"id": "p1", "name": "Project Alpha", "clientName": "Acme"},
            {"id": "p2", "name": "Internal"},
        ],
        tasks={
            "p1": [{"id": "t1", "name": "Development"}, {"id": "t2", "name": "Daily Standup"}],
            "p2": [],
        },
    )


def chat_completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1736806020,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2},
    }


class FakeOpenAI:
    """Records chat requests and replies with a canned completion."""

    def __init__(self, content="[]", status=200, body=None):
        self.content = content
        self.status = status
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200:
            return httpx.Response(self.status, text=self.body or "error")
        return httpx.Response(200, json=chat_completion(self.content))

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self))
