"""Failure kinds surfaced by the generation client."""


class GenerationError(Exception):
    """Base class for every failure of a generation call."""


class TransportError(GenerationError):
    """Network-level failure: refused connection, DNS failure or timeout."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ServerError(GenerationError):
    """Non-2xx status or an empty body."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Error from Ollama: {status_code} - {message}")
        self.status_code = status_code
        self.message = message


class MalformedResponseError(GenerationError):
    """Body present but not parseable as a generation response."""

    def __init__(self, message: str, raw_body: str):
        super().__init__(message)
        self.raw_body = raw_body
