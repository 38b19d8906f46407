"""Shared fixtures: in-memory provider clients and an app factory."""

from types import SimpleNamespace

import pytest

from utils.app_config import AppConfig

# 1x1 transparent PNG
TINY_PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def chat_response(text):
    """Build a chat completion shaped like the OpenAI SDK object."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=text))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=3),
    )


def responses_output(text):
    """Build a Responses API reply exposing `output_text`."""
    return SimpleNamespace(
        output_text=text,
        output=[],
        usage=SimpleNamespace(input_tokens=20, output_tokens=5),
    )


class FakeEndpoint:
    """Records `create` calls and returns a canned reply or raises."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeVisionClient:
    def __init__(self, response=None, error=None):
        self.chat = SimpleNamespace(completions=FakeEndpoint(response, error))

    @property
    def calls(self):
        return self.chat.completions.calls


class FakeLLMClient:
    def __init__(self, response=None, error=None):
        self.responses = FakeEndpoint(response, error)

    @property
    def calls(self):
        return self.responses.calls


@pytest.fixture
def config(tmp_path):
    temp_dir = tmp_path / "temp"
    temp_dir.mkdir()
    return AppConfig(port=5001, temp_dir=temp_dir, recognition_image_mode="inline")


@pytest.fixture
def app_factory(config):
    """Return a builder that creates the app with fake clients attached before startup."""
    from main import create_app

    def _build(vision_client=None, llm_client=None, **overrides):
        cfg = config
        if overrides:
            values = dict(vars(config))
            values.update(overrides)
            cfg = AppConfig(**values)
        app = create_app(cfg)
        app.state.vision_client = vision_client or FakeVisionClient(chat_response("2+2"))
        app.state.llm_client = llm_client or FakeLLMClient(responses_output("4"))
        return app

    return _build
