"""Helpers to validate and unwrap hosted model replies."""

from typing import Any, Dict, Optional

from utils.errors import GatewayError


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_completion_text(response: Any) -> str:
    """Return `choices[0].message.content` from a chat completion.

    Raises:
        GatewayError: If any level of the nested path is absent or the text is empty.
    """
    choices = _field(response, "choices")
    if not choices:
        raise GatewayError("Invalid response format from vision provider: no choices returned.")

    message = _field(choices[0], "message")
    if message is None:
        raise GatewayError("Invalid response format from vision provider: choice has no message.")

    content = _field(message, "content")
    if not isinstance(content, str) or not content.strip():
        raise GatewayError("Invalid response format from vision provider: empty completion text.")
    return content.strip()


def extract_output_text(response: Any) -> str:
    """Return the aggregated `output_text` of a Responses API reply.

    Falls back to the first `output_text` content part when the convenience
    property is not populated.

    Raises:
        GatewayError: If no non-empty text is present.
    """
    text = _field(response, "output_text")
    if not isinstance(text, str) or not text.strip():
        text = None
        for item in _field(response, "output") or []:
            if _field(item, "type") != "message":
                continue
            for content in _field(item, "content") or []:
                if _field(content, "type") == "output_text":
                    text = _field(content, "text")
                    break
            if text:
                break

    if not isinstance(text, str) or not text.strip():
        raise GatewayError("Invalid response format from language model: empty output text.")
    return text.strip()


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage if present.

    Chat completions report `prompt_tokens`/`completion_tokens`; the Responses
    API reports `input_tokens`/`output_tokens`.
    """
    usage = _field(response, "usage")
    if usage is None:
        return {"input_tokens": None, "output_tokens": None}
    input_tokens = _field(usage, "input_tokens")
    output_tokens = _field(usage, "output_tokens")
    if input_tokens is None:
        input_tokens = _field(usage, "prompt_tokens")
    if output_tokens is None:
        output_tokens = _field(usage, "completion_tokens")
    return {"input_tokens": input_tokens, "output_tokens": output_tokens}
