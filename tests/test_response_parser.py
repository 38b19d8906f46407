"""
Tests for provider reply validation.
"""

from types import SimpleNamespace

import pytest

from conftest import chat_response, responses_output
from services.openai.response_parser import extract_completion_text, extract_output_text, extract_usage
from utils.errors import GatewayError


class TestCompletionText:
    def test_unwraps_nested_content(self):
        assert extract_completion_text(chat_response("  x^2+1 \n")) == "x^2+1"

    def test_accepts_plain_dicts(self):
        payload = {"choices": [{"message": {"content": "3*3"}}]}
        assert extract_completion_text(payload) == "3*3"

    @pytest.mark.parametrize(
        "response",
        [
            SimpleNamespace(),
            SimpleNamespace(choices=[]),
            SimpleNamespace(choices=[SimpleNamespace(message=None)]),
            SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))]),
            SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="   "))]),
        ],
    )
    def test_malformed_shapes_raise(self, response):
        with pytest.raises(GatewayError):
            extract_completion_text(response)


class TestOutputText:
    def test_uses_output_text(self):
        assert extract_output_text(responses_output(" 4 ")) == "4"

    def test_falls_back_to_message_content(self):
        response = SimpleNamespace(
            output_text="",
            output=[
                SimpleNamespace(type="reasoning", content=[]),
                SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text="42")]),
            ],
        )
        assert extract_output_text(response) == "42"

    def test_empty_reply_raises(self):
        with pytest.raises(GatewayError):
            extract_output_text(SimpleNamespace(output_text=None, output=[]))


class TestUsage:
    def test_chat_usage_names(self):
        assert extract_usage(chat_response("1")) == {"input_tokens": 12, "output_tokens": 3}

    def test_responses_usage_names(self):
        assert extract_usage(responses_output("1")) == {"input_tokens": 20, "output_tokens": 5}

    def test_missing_usage(self):
        assert extract_usage(SimpleNamespace()) == {"input_tokens": None, "output_tokens": None}
