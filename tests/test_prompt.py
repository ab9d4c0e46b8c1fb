"""Tests for prompt and request building."""
import pytest

from ollama_testgen.llm.prompt import (
    COMMENTS_INSTRUCTION,
    MOCKING_INSTRUCTION,
    build_prompt,
    build_request,
    expected_test_class_name,
)
from ollama_testgen.settings import Settings

SOURCE = "public class Calculator {\n    public int add(int a, int b) { return a + b; }\n}"


class TestBuildPrompt:
    """Tests for build_prompt."""

    def test_contains_source_verbatim(self):
        """Class source appears unchanged inside a java fence."""
        prompt = build_prompt("Calculator", SOURCE, True, True)
        assert SOURCE in prompt
        assert f"```java\n{SOURCE}\n```" in prompt

    def test_names_test_class(self):
        """Prompt asks for <Class>Test."""
        prompt = build_prompt("Calculator", SOURCE, False, False)
        assert "CalculatorTest" in prompt
        assert "each public method" in prompt

    def test_always_asks_for_unit_test(self):
        """Opening instruction is always present."""
        prompt = build_prompt("Calculator", SOURCE, False, False)
        assert prompt.startswith("Generate a JUnit 5 unit test for the following Java class.")

    @pytest.mark.parametrize("use_mocking", [True, False])
    @pytest.mark.parametrize("include_comments", [True, False])
    def test_flags_toggle_independently(self, use_mocking, include_comments):
        """Each instruction appears iff its flag is set."""
        prompt = build_prompt("Calculator", SOURCE, use_mocking, include_comments)
        assert (MOCKING_INSTRUCTION in prompt) is use_mocking
        assert (COMMENTS_INSTRUCTION in prompt) is include_comments

    def test_empty_inputs_still_build(self):
        """No validation: empty inputs give a prompt, not an error."""
        prompt = build_prompt("", "", False, False)
        assert "named Test" in prompt
        assert "```java\n\n```" in prompt


def test_expected_test_class_name():
    """Test class name is the class name plus Test."""
    assert expected_test_class_name("OrderService") == "OrderServiceTest"


class TestBuildRequest:
    """Tests for build_request."""

    def test_copies_model_and_disables_stream(self, settings):
        """Model comes from settings and stream is off."""
        request = build_request("prompt text", settings)
        assert request.model == "qwen2.5-coder:7b"
        assert request.prompt == "prompt text"
        assert request.stream is False
        assert request.options is None

    def test_payload_is_flat(self, settings):
        """Wire payload has exactly model, prompt and stream."""
        payload = build_request("p", settings).to_payload()
        assert payload == {"model": "qwen2.5-coder:7b", "prompt": "p", "stream": False}

    def test_options_from_settings(self):
        """Sampling options are attached when configured."""
        settings = Settings(temperature=0.3, max_tokens=2048)
        payload = build_request("p", settings).to_payload()
        assert payload["options"] == {"temperature": 0.3, "num_predict": 2048}

    def test_partial_options(self):
        """Only configured options are serialized."""
        payload = build_request("p", Settings(max_tokens=512)).to_payload()
        assert payload["options"] == {"num_predict": 512}
