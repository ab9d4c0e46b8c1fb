"""Settings loading and validation."""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = Path("config/testgen.yaml")

MIN_TIMEOUT_S = 10
MAX_TIMEOUT_S = 300

# Environment variable -> settings field
ENV_OVERRIDES = {
    "OLLAMA_URL": "endpoint_url",
    "OLLAMA_MODEL": "model_name",
    "OLLAMA_TIMEOUT": "timeout_seconds",
}


@dataclass(frozen=True)
class Settings:
    """Snapshot of the generator settings.

    Frozen so an in-flight request never sees later changes; use
    ``dataclasses.replace`` to derive a modified copy.
    """

    endpoint_url: str = "http://localhost:11434"
    model_name: str = "qwen2.5-coder:7b"
    timeout_seconds: int = 60
    include_mockito: bool = True
    include_comments: bool = True
    connect_timeout_seconds: int = 10
    temperature: float | None = None
    max_tokens: int | None = None
    language: str = "java"
    trace_dir: str | None = None

    def validate(self) -> None:
        """Check field values.

        Raises:
            ValueError: If any value is out of range or empty
        """
        if not self.endpoint_url or not self.endpoint_url.strip():
            raise ValueError("endpoint_url must not be empty")
        if not self.endpoint_url.startswith(("http://", "https://")):
            raise ValueError(
                f"endpoint_url must start with http:// or https://, got '{self.endpoint_url}'"
            )
        if not self.model_name or not self.model_name.strip():
            raise ValueError("model_name must not be empty")
        if not MIN_TIMEOUT_S <= self.timeout_seconds <= MAX_TIMEOUT_S:
            raise ValueError(
                f"timeout_seconds must be between {MIN_TIMEOUT_S} and {MAX_TIMEOUT_S}, "
                f"got {self.timeout_seconds}"
            )
        if self.connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be positive")
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0.0 and 2.0, got {self.temperature}")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    @property
    def base_url(self) -> str:
        return self.endpoint_url.rstrip("/")


INT_FIELDS = ("timeout_seconds", "connect_timeout_seconds", "max_tokens")
FLOAT_FIELDS = ("temperature",)
BOOL_FIELDS = ("include_mockito", "include_comments")
STR_FIELDS = ("endpoint_url", "model_name", "language", "trace_dir")


def _coerce(name: str, value: Any) -> Any:
    """Convert environment and YAML values to the field's type.

    Numbers may arrive as strings (environment variables, quoted YAML).
    Booleans must be real YAML booleans; ``"false"`` is rejected rather
    than read as a truthy string.

    Raises:
        ValueError: If the value cannot be used for the field
    """
    if value is None:
        return None
    if name in INT_FIELDS:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer, got '{value}'")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{name} must be an integer, got '{value}'") from e
    if name in FLOAT_FIELDS:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be a number, got '{value}'")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{name} must be a number, got '{value}'") from e
    if name in BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be true or false, got '{value}'")
        return value
    if name in STR_FIELDS:
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string, got '{value}'")
        return value
    return value


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML and the environment.

    Values come from, in increasing priority: the dataclass defaults, the
    ``ollama`` section of the YAML file, and the ``OLLAMA_*`` environment
    variables (a ``.env`` file is loaded first).

    Args:
        path: YAML file to read. When omitted, ``config/testgen.yaml`` is used
            if it exists.

    Returns:
        Validated settings

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        ValueError: If configuration is invalid
        yaml.YAMLError: If YAML is malformed
    """
    load_dotenv()

    values: dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
    elif DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH

    if path is not None:
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError("Configuration file must contain a mapping")

        section = data.get("ollama", {}) or {}
        if not isinstance(section, dict):
            raise ValueError("'ollama' section must be a mapping")

        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ValueError(f"Unknown settings in 'ollama' section: {', '.join(unknown)}")
        values.update({name: _coerce(name, value) for name, value in section.items()})

    for env_name, field_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            values[field_name] = _coerce(field_name, env_value)

    settings = replace(Settings(), **values)
    settings.validate()
    return settings
