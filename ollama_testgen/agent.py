"""
Test Generation Agent
---------------------
Responsibility:
1. Read a Java class from disk
2. Check the Ollama endpoint is reachable
3. Ask the model for a unit test
4. Write {ClassName}Test.java under the matching test root

Usage:
    python -m ollama_testgen.agent src/main/java/com/acme/Foo.java
    python -m ollama_testgen.agent Foo.java --no-mockito --output-dir build/gen-tests
    python -m ollama_testgen.agent --scan src/main/java
    python -m ollama_testgen.agent --scan src/main/java --generate
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path

import yaml

from .java_source import is_test_class, read_java_class
from .llm import GenerationError, OllamaClient, build_prompt, build_request, expected_test_class_name
from .logger import get_logger, set_level
from .settings import Settings, load_settings
from .workspace import find_test_directory, find_untested_classes, safe_write_test_file

logger = get_logger(__name__)


async def generate_test_code(
    client: OllamaClient,
    class_name: str,
    class_source: str,
    settings: Settings,
    use_mocking: bool | None = None,
    include_comments: bool | None = None,
) -> str:
    """Build the prompt for a class and return the extracted test code.

    Option flags default to the settings values.

    Raises:
        GenerationError: Any failure of the generation call
    """
    if use_mocking is None:
        use_mocking = settings.include_mockito
    if include_comments is None:
        include_comments = settings.include_comments

    prompt = build_prompt(class_name, class_source, use_mocking, include_comments)
    request = build_request(prompt, settings)
    result = await client.generate(request, settings)
    return result.code


async def run_test_generation(
    source_path: str | Path,
    settings: Settings,
    *,
    test_class_name: str | None = None,
    use_mocking: bool | None = None,
    include_comments: bool | None = None,
    output_dir: str | Path | None = None,
    force: bool = False,
    client: OllamaClient | None = None,
) -> dict:
    """
    Executes test generation for one Java source file.

    Returns:
        {"success": True, "test_file": ..., "written": ...} or
        {"success": False, "error": ...}
    """
    # 1. Read the class
    try:
        java_class = read_java_class(source_path)
    except (OSError, ValueError) as e:
        return {"success": False, "error": f"Failed to read source: {e}"}

    if is_test_class(java_class.name, java_class.source, java_class.path):
        return {"success": False, "error": f"{java_class.name} is already a test class."}

    test_class_name = test_class_name or expected_test_class_name(java_class.name)
    logger.info(
        "agent.start",
        event="agent.start",
        class_name=java_class.qualified_name,
        test_class_name=test_class_name,
        model=settings.model_name,
    )

    owns_client = client is None
    if owns_client:
        client = OllamaClient()

    try:
        # 2. Probe the endpoint first so the user gets a clear message
        if not await client.check_availability(settings):
            return {
                "success": False,
                "error": f"Ollama is not available at {settings.endpoint_url}",
            }

        # 3. Generate
        try:
            test_code = await generate_test_code(
                client,
                java_class.name,
                java_class.source,
                settings,
                use_mocking=use_mocking,
                include_comments=include_comments,
            )
        except GenerationError as e:
            return {"success": False, "error": f"Error generating tests: {e}"}
    finally:
        if owns_client:
            await asyncio.get_running_loop().run_in_executor(None, client.close)

    # 4. Write the test file
    test_root = Path(output_dir) if output_dir else find_test_directory(java_class.path)
    try:
        test_file, written = safe_write_test_file(
            test_root,
            java_class.package,
            test_class_name,
            test_code,
            force=force,
        )
    except (OSError, ValueError) as e:
        return {"success": False, "error": f"Could not create test file: {e}"}

    logger.info(
        "agent.done",
        event="agent.done",
        test_file=str(test_file),
        written=written,
    )
    return {
        "success": True,
        "test_file": str(test_file),
        "written": written,
    }


async def run_scan(
    source_root: str | Path,
    settings: Settings,
    *,
    generate: bool = False,
    use_mocking: bool | None = None,
    include_comments: bool | None = None,
    output_dir: str | Path | None = None,
    force: bool = False,
    client: OllamaClient | None = None,
) -> dict:
    """
    Report classes under ``source_root`` that have no test, optionally
    generating one for each.

    Returns:
        {"success": True, "untested": [...]} when only reporting,
        {"success": <all generated>, "untested": [...], "results": [...]}
        when generating, or {"success": False, "error": ...}
    """
    test_root = Path(output_dir) if output_dir else None
    try:
        untested = find_untested_classes(Path(source_root), test_root)
    except OSError as e:
        return {"success": False, "error": f"Failed to scan sources: {e}"}

    report = {
        "success": True,
        "untested": [
            {"class_name": java_class.qualified_name, "path": str(java_class.path)}
            for java_class in untested
        ],
    }
    if not generate or not untested:
        return report

    owns_client = client is None
    if owns_client:
        client = OllamaClient()

    results = []
    try:
        for java_class in untested:
            result = await run_test_generation(
                java_class.path,
                settings,
                use_mocking=use_mocking,
                include_comments=include_comments,
                output_dir=output_dir,
                force=force,
                client=client,
            )
            results.append({"class_name": java_class.qualified_name, **result})
    finally:
        if owns_client:
            await asyncio.get_running_loop().run_in_executor(None, client.close)

    report["results"] = results
    report["success"] = all(result["success"] for result in results)
    return report


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate a unit test for a Java class with a local Ollama model"
    )
    parser.add_argument("source", nargs="?", help="Path to the .java file to test")
    parser.add_argument(
        "--scan",
        metavar="DIR",
        help="List classes under DIR that have no test instead of generating one",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="With --scan, generate a test for every class found",
    )
    parser.add_argument(
        "--config",
        help="Path to settings file (default: config/testgen.yaml if present)",
    )
    parser.add_argument("--test-class-name", help="Name of the test class (default: <Class>Test)")
    parser.add_argument(
        "--mockito",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Ask for Mockito mocks (default: from settings)",
    )
    parser.add_argument(
        "--comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Ask for explanatory comments (default: from settings)",
    )
    parser.add_argument("--model", help="Override the model name")
    parser.add_argument("--output-dir", help="Write under this directory instead of the test root")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing test file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if (args.source is None) == (args.scan is None):
        parser.error("give either a source file or --scan DIR")
    if args.generate and not args.scan:
        parser.error("--generate requires --scan")
    if args.scan and args.test_class_name:
        parser.error("--test-class-name cannot be used with --scan")

    if args.verbose:
        set_level("DEBUG")

    try:
        settings = load_settings(args.config)
        if args.model:
            settings = replace(settings, model_name=args.model)
            settings.validate()
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.scan:
        result = asyncio.run(
            run_scan(
                args.scan,
                settings,
                generate=args.generate,
                use_mocking=args.mockito,
                include_comments=args.comments,
                output_dir=args.output_dir,
                force=args.force,
            )
        )
    else:
        result = asyncio.run(
            run_test_generation(
                args.source,
                settings,
                test_class_name=args.test_class_name,
                use_mocking=args.mockito,
                include_comments=args.comments,
                output_dir=args.output_dir,
                force=args.force,
            )
        )

    print(json.dumps(result, indent=2))
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
