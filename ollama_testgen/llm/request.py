"""Generation request and response data structures."""

from dataclasses import dataclass
from typing import Any

from .errors import MalformedResponseError


@dataclass
class GenerationOptions:
    """Optional sampling parameters for a generation request."""

    temperature: float | None = None
    max_tokens: int | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the endpoint's ``options`` object."""
        options: dict[str, Any] = {}
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        return options


@dataclass
class GenerationRequest:
    """Request data for a single non-streamed generation."""

    model: str
    prompt: str
    stream: bool = False
    options: GenerationOptions | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the flat JSON object sent to ``/api/generate``."""
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "stream": self.stream,
        }
        if self.options is not None:
            options = self.options.to_payload()
            if options:
                payload["options"] = options
        return payload


@dataclass
class GenerationResponse:
    """Response data from ``/api/generate``. Only ``response`` is required."""

    response_text: str
    model: str | None = None

    @classmethod
    def from_payload(cls, data: Any, raw_body: str = "") -> "GenerationResponse":
        """Build a response from decoded JSON.

        Args:
            data: Decoded JSON body
            raw_body: Undecoded body, kept for diagnostics

        Returns:
            Parsed response

        Raises:
            MalformedResponseError: If the body does not match the schema
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}", raw_body
            )
        text = data.get("response")
        if not isinstance(text, str):
            raise MalformedResponseError("Missing 'response' field in reply", raw_body)

        return cls(
            response_text=text,
            model=data.get("model"),
        )


@dataclass
class GenerationResult:
    """Successful outcome of a generation call."""

    code: str
    raw_text: str
    model: str
    request_id: str = ""
    elapsed_ms: int = 0

    def __post_init__(self):
        """Ensure request_id is set."""
        if not self.request_id:
            import uuid
            self.request_id = str(uuid.uuid4())
