"""Prompt and request construction for test generation."""

from ..settings import Settings
from .request import GenerationOptions, GenerationRequest

HEADER = "Generate a JUnit 5 unit test for the following Java class.\n\n"
MOCKING_INSTRUCTION = "Use Mockito for mocking dependencies.\n"
COMMENTS_INSTRUCTION = "Include clear comments explaining the tests.\n"


def expected_test_class_name(class_name: str) -> str:
    """Name of the test class generated for ``class_name``."""
    return f"{class_name}Test"


def build_prompt(
    class_name: str,
    class_source: str,
    use_mocking: bool,
    include_comments: bool,
) -> str:
    """Build the generation prompt for a class.

    Empty inputs are not rejected; the prompt is simply less useful.

    Args:
        class_name: Simple name of the class under test
        class_source: Verbatim source text of the class
        use_mocking: Ask for Mockito-based mocks of dependencies
        include_comments: Ask for explanatory comments

    Returns:
        Prompt text
    """
    parts = [HEADER]

    if use_mocking:
        parts.append(MOCKING_INSTRUCTION)

    if include_comments:
        parts.append(COMMENTS_INSTRUCTION)

    parts.append("\nHere is the class to test:\n\n```java\n")
    parts.append(class_source)
    parts.append("\n```\n\n")
    parts.append(
        f"Generate a complete test class named {expected_test_class_name(class_name)} "
        "with comprehensive test methods for each public method."
    )

    return "".join(parts)


def build_request(prompt: str, settings: Settings) -> GenerationRequest:
    """Wrap a prompt in a non-streamed request for the configured model."""
    options = None
    if settings.temperature is not None or settings.max_tokens is not None:
        options = GenerationOptions(
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    return GenerationRequest(
        model=settings.model_name,
        prompt=prompt,
        stream=False,
        options=options,
    )
