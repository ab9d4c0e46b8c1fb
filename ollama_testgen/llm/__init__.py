"""Ollama generation client - prompt building, transport and response handling."""

from .client import OllamaClient
from .errors import GenerationError, MalformedResponseError, ServerError, TransportError
from .prompt import build_prompt, build_request, expected_test_class_name
from .request import GenerationOptions, GenerationRequest, GenerationResponse, GenerationResult

__all__ = [
    "OllamaClient",
    "GenerationError",
    "TransportError",
    "ServerError",
    "MalformedResponseError",
    "build_prompt",
    "build_request",
    "expected_test_class_name",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationResponse",
    "GenerationResult",
]
