"""Pytest configuration for ollama-testgen tests."""
import sys
from pathlib import Path

import pytest

# Add project root to path so 'ollama_testgen' can be imported without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ollama_testgen.settings import Settings  # noqa: E402


@pytest.fixture
def settings():
    """Default settings pointing at a local endpoint."""
    return Settings(endpoint_url="http://localhost:11434", model_name="qwen2.5-coder:7b")


@pytest.fixture(autouse=True)
def clean_ollama_env(monkeypatch):
    """Keep developer OLLAMA_* variables out of the tests."""
    for name in ("OLLAMA_URL", "OLLAMA_MODEL", "OLLAMA_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
