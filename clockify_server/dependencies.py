"""FastAPI dependencies for settings and outbound HTTP plumbing.

The transport/client dependencies return None in production so the real
network stack is used; tests override them with httpx.MockTransport.
"""
import httpx

from .config import Settings, get_settings


def settings_dependency() -> Settings:
    return get_settings()


def clockify_transport() -> httpx.AsyncBaseTransport | None:
    return None


def graph_transport() -> httpx.AsyncBaseTransport | None:
    return None


def openai_http_client() -> httpx.AsyncClient | None:
    return None
