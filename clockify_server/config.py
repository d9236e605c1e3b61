"""Shared configuration for the Clockify NLP server."""
import os
from functools import lru_cache
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

CLOCKIFY_BASE_URL = "https://api.clockify.me/api/v1"
GRAPH_BASE_URL    = "https://graph.microsoft.com/v1.0"
OPENAI_MODEL      = "gpt-4o-mini"


class Settings(BaseModel):
    openai_api_key:    str | None = None
    openai_model:      str = OPENAI_MODEL
    openai_base_url:   str | None = None
    clockify_api_key:  str | None = None
    clockify_base_url: str = CLOCKIFY_BASE_URL
    graph_base_url:    str = GRAPH_BASE_URL
    timezone:          str = "UTC"
    log_level:         str = "INFO"
    http_timeout:      float = 30.0
    api_host:          str = "0.0.0.0"
    api_port:          int = 8000

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def clockify_headers(self, token: str) -> dict:
        return {"X-Api-Key": token, "Content-Type": "application/json"}


def load_settings() -> Settings:
    """Read settings from the environment (and .env, loaded at import)."""
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", OPENAI_MODEL),
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        clockify_api_key=os.getenv("CLOCKIFY_API_KEY") or None,
        clockify_base_url=os.getenv("CLOCKIFY_BASE_URL", CLOCKIFY_BASE_URL),
        graph_base_url=os.getenv("GRAPH_BASE_URL", GRAPH_BASE_URL),
        timezone=os.getenv("TIMEZONE", "UTC"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        http_timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=int(os.getenv("API_PORT", "8000")),
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return load_settings()
