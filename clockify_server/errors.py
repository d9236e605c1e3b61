"""Error kinds raised by the parse chain."""


class ClockifyNLPError(Exception):
    """Base class for errors surfaced to the caller."""


class ConfigError(ClockifyNLPError):
    """A required credential is not configured."""


class ServiceError(ClockifyNLPError):
    """A dependent network call failed or returned an empty body."""

    def __init__(self, call: str, status: int | None = None, body: str = ""):
        self.call = call
        self.status = status
        self.body = body
        detail = f"{call} failed"
        if status is not None:
            detail += f": {status}"
        if body:
            detail += f" - {body}"
        super().__init__(detail)


class FormatError(ClockifyNLPError):
    """Model output could not be parsed or failed validation."""

    def __init__(self, message: str, content=None):
        self.message = message
        self.content = content
        super().__init__(message)
