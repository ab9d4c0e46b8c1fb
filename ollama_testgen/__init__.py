"""ollama-testgen - draft unit tests for Java classes with a local Ollama model."""

from .code_extractor import extract_code
from .settings import Settings, load_settings

__version__ = "0.1.0"

__all__ = [
    "extract_code",
    "Settings",
    "load_settings",
]
