"""
Ollama Endpoint Health Check - Report whether the generation server is reachable.

Usage:
    python -m ollama_testgen.llm.health --config config/testgen.yaml
    python -m ollama_testgen.llm.health --url http://gpu-box:11434
    python -m ollama_testgen.llm.health --json
"""

import argparse
import json
import sys
import time
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone

import yaml

from ..logger import set_level
from ..settings import Settings, load_settings
from .client import OllamaClient


@dataclass
class EndpointHealth:
    """Reachability status for the configured endpoint."""

    endpoint_url: str
    model: str
    available: bool
    latency_ms: int | None = None
    error: str | None = None
    timestamp: str | None = None


def check_endpoint_health(settings: Settings, client: OllamaClient) -> EndpointHealth:
    """Probe the endpoint and time the probe.

    Args:
        settings: Settings snapshot
        client: Client used for the probe

    Returns:
        EndpointHealth with status information
    """
    health = EndpointHealth(
        endpoint_url=settings.endpoint_url,
        model=settings.model_name,
        available=False,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    start_time = time.time()
    health.available = client.check_availability_sync(settings)
    health.latency_ms = int((time.time() - start_time) * 1000)

    if not health.available:
        health.error = f"Ollama is not available at {settings.endpoint_url}"

    return health


def format_health_status(available: bool) -> str:
    """Format availability with a check mark."""
    return "✓" if available else "✗"


def print_health_report(health: EndpointHealth) -> None:
    """Print a human-readable report.

    Args:
        health: Health check result
    """
    print("Ollama Health Check")
    print("=" * 60)
    print()
    print(f"Endpoint: {health.endpoint_url}")
    print(f"Model:    {health.model}")
    print()

    status = format_health_status(health.available)
    if health.available:
        latency = f"{health.latency_ms}ms" if health.latency_ms is not None else "N/A"
        print(f"Status: {status} AVAILABLE (latency: {latency})")
    else:
        print(f"Status: {status} UNAVAILABLE - {health.error}")


def print_health_json(health: EndpointHealth) -> None:
    """Print the result as JSON.

    Args:
        health: Health check result
    """
    print(json.dumps(asdict(health), indent=2))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Check whether the Ollama endpoint is reachable"
    )
    parser.add_argument(
        "--config",
        help="Path to settings file (default: config/testgen.yaml if present)",
    )
    parser.add_argument(
        "--url",
        help="Override the endpoint URL",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        set_level("DEBUG")

    try:
        settings = load_settings(args.config)
        if args.url:
            settings = replace(settings, endpoint_url=args.url)
            settings.validate()
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    with OllamaClient(max_workers=1) as client:
        health = check_endpoint_health(settings, client)

    if args.json:
        print_health_json(health)
    else:
        print_health_report(health)

    return 0 if health.available else 1


if __name__ == "__main__":
    sys.exit(main())
