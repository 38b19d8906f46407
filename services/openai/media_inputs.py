"""Utilities to build multimodal payloads for the chat and Responses APIs."""

from typing import Any, Dict, List

from utils.media_validation import DEFAULT_MIME_TYPE


def to_image_data_url(payload: str, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Wrap a bare base64 payload in a data URL suitable for vision input."""
    return f"data:{mime_type};base64,{payload}"


def build_chat_messages(prompt: str, image_url: str) -> List[Dict[str, Any]]:
    """Compose a single user turn for an OpenAI-compatible chat completion."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image_url}},
            ],
        }
    ]


def build_response_inputs(prompt: str, image_url: str, *, detail: str = "high") -> List[Dict[str, Any]]:
    """Compose a single user message with text and image for the Responses API."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "input_text", "text": prompt},
                {"type": "input_image", "image_url": image_url, "detail": detail},
            ],
        }
    ]
