"""Handwritten expression recognition through a hosted vision model."""

import logging
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from models.results import RecognitionSuccess
from services.image_store import ImageStore
from services.openai.math_prompts import RECOGNITION_MAX_CHARS, build_recognition_prompt
from services.openai.media_inputs import build_chat_messages, to_image_data_url
from services.openai.response_parser import extract_completion_text, extract_usage
from utils.app_config import DEFAULT_VISION_MODEL
from utils.media_validation import require_image_payload

LOGGER = logging.getLogger(__name__)

RECOGNITION_TEMPERATURE = 0.1
RECOGNITION_MAX_TOKENS = 100


class ExpressionRecognizer:
    """Turn a drawn or uploaded image into a short expression string."""

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = DEFAULT_VISION_MODEL,
        image_mode: str = "inline",
        image_store: Optional[ImageStore] = None,
        max_chars: int = RECOGNITION_MAX_CHARS,
    ) -> None:
        """
        Args:
            client: OpenAI-compatible async client pointed at the vision provider.
            model: Vision-capable model name.
            image_mode: `inline` attaches a data URL; `url` stores the image and sends its URL.
            image_store: Required when `image_mode` is `url`.
            max_chars: Length the recognized text is truncated to.
        """
        if client is None:
            raise ValueError("Vision client must be provided.")
        if image_mode == "url" and image_store is None:
            raise ValueError("An image store is required when images are sent by URL.")
        self.client = client
        self.model = model
        self.image_mode = image_mode
        self.image_store = image_store
        self.max_chars = max_chars
        self.prompt = build_recognition_prompt(max_chars)

    async def _image_reference(self, mime_type: str, payload: str) -> str:
        if self.image_mode == "url":
            image_url = await self.image_store.save(to_image_data_url(payload, mime_type))
            LOGGER.info("Image saved at: %s", image_url)
            return image_url
        return to_image_data_url(payload, mime_type)

    async def _create_completion(self, messages: List[Dict[str, Any]]) -> Any:
        try:
            return await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=RECOGNITION_MAX_TOKENS,
                temperature=RECOGNITION_TEMPERATURE,
                stream=False,
            )
        except Exception as exc:
            LOGGER.error("Vision provider request failed: %s", exc)
            raise

    async def recognize(self, image_base64: Optional[str]) -> RecognitionSuccess:
        """Recognize the expression drawn in `image_base64`.

        Raises:
            ImagePayloadError: If the payload is missing or cannot be stored.
            GatewayError: If the provider reply has no completion text.
        """
        start_time = time.time()
        mime_type, payload = require_image_payload(image_base64)
        image_url = await self._image_reference(mime_type, payload)

        response = await self._create_completion(build_chat_messages(self.prompt, image_url))
        try:
            text = extract_completion_text(response)
        except Exception:
            LOGGER.error("Full vision response object: %r", response)
            raise

        # Longer answers are clipped on purpose so the client only ever sees one short expression.
        truncated = text[: self.max_chars]
        usage = extract_usage(response)
        LOGGER.info(
            "Recognized %r in %.2fs (input_tokens=%s, output_tokens=%s)",
            truncated,
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return RecognitionSuccess(text=truncated)
