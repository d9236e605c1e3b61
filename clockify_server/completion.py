"""OpenAI chat-completion call: system prompt + user command -> raw text."""
import logging

import httpx
import openai

from .config import Settings
from .errors import ConfigError, ServiceError

logger = logging.getLogger(__name__)

TEMPERATURE = 0.1
MAX_TOKENS  = 2000


def openai_client(settings: Settings, http_client: httpx.AsyncClient | None = None) -> openai.AsyncOpenAI:
    """Build an SDK client with retries disabled; every call is a single attempt."""
    if not settings.openai_api_key:
        raise ConfigError("OpenAI API key not configured. Set OPENAI_API_KEY in your .env file.")
    return openai.AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.http_timeout,
        max_retries=0,
        http_client=http_client,
    )


class CompletionClient:
    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self.model = settings.openai_model
        self.client = openai_client(settings, http_client)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        await self.client.close()

    async def complete(self, system_prompt: str, command: str) -> str:
        logger.debug("Sending command %r with %d-char system prompt", command, len(system_prompt))
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": command},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except openai.APIStatusError as e:
            raise ServiceError("openai.chat.completions", e.status_code, e.response.text) from e
        except openai.APIConnectionError as e:
            raise ServiceError("openai.chat.completions", body=str(e)) from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            raise ServiceError("openai.chat.completions", body="No response from OpenAI")
        logger.debug("AI response: %s", content)
        return content
