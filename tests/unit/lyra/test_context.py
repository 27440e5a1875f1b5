"""Unit tests for payload extraction and PromptContext."""

import json

import pytest

from lyra.context import build_context, extract_prompt


class TestExtractPrompt:
    """Tests for hook payload parsing."""

    def test_prompt_key(self):
        assert extract_prompt(json.dumps({"prompt": "build an app"})) == "build an app"

    def test_legacy_message_key(self):
        assert extract_prompt(json.dumps({"message": "build an app"})) == "build an app"

    def test_prompt_preferred_over_message(self):
        payload = json.dumps({"prompt": "first", "message": "second"})
        assert extract_prompt(payload) == "first"

    def test_blank_prompt_falls_back_to_message(self):
        payload = json.dumps({"prompt": "   ", "message": "second"})
        assert extract_prompt(payload) == "second"

    def test_extra_fields_ignored(self):
        payload = json.dumps({"prompt": "hi there", "session_id": "abc", "cwd": "/tmp"})
        assert extract_prompt(payload) == "hi there"

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "",
            "   \n",
            "not json at all",
            "{broken",
            json.dumps(["prompt", "list"]),
            json.dumps("just a string"),
            json.dumps({}),
            json.dumps({"prompt": 42}),
            json.dumps({"prompt": None}),
            json.dumps({"other": "field"}),
        ],
    )
    def test_unusable_payloads(self, payload):
        assert extract_prompt(payload) is None

    def test_deeply_nested_payload(self):
        assert extract_prompt("[" * 200000) is None


class TestBuildContext:
    """Tests for PromptContext construction."""

    def test_normalizes_text(self):
        context = build_context("  Build A Dashboard  \n")
        assert context.raw_text == "  Build A Dashboard  \n"
        assert context.normalized_text == "build a dashboard"
        assert context.length == len("build a dashboard")

    def test_managed_flag(self):
        assert build_context("x", has_managed_project=True).has_managed_project is True
        assert build_context("x").has_managed_project is False

    def test_is_frozen(self):
        context = build_context("x")
        with pytest.raises(AttributeError):
            context.normalized_text = "y"  # type: ignore[misc]
