"""Final answers and step-by-step solutions from a hosted text+vision model."""

import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from models.results import SolutionResult
from services.openai.math_prompts import build_explain_prompt, build_solve_prompt
from services.openai.media_inputs import build_response_inputs, to_image_data_url
from services.openai.response_parser import extract_output_text, extract_usage
from services.step_formatter import format_steps
from utils.app_config import DEFAULT_SOLVER_MODEL
from utils.media_validation import require_image_payload

LOGGER = logging.getLogger(__name__)


class SolutionService:
    """Ask the language model to solve or explain a handwritten expression."""

    def __init__(self, client: AsyncOpenAI, *, model: str = DEFAULT_SOLVER_MODEL) -> None:
        """Initialize the service with a shared OpenAI client."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Send the multimodal request to the OpenAI Responses API."""
        try:
            return await self.client.responses.create(model=self.model, input=inputs)
        except Exception as exc:
            LOGGER.error("Error during OpenAI Responses API call: %s", exc)
            raise

    async def _ask(self, prompt: str, image_base64: Optional[str]) -> str:
        mime_type, payload = require_image_payload(image_base64)
        inputs = build_response_inputs(prompt, to_image_data_url(payload, mime_type), detail="high")
        response = await self._create_response(inputs)
        text = extract_output_text(response)
        LOGGER.info("Language model usage: %s", extract_usage(response))
        return text

    async def solve(self, image_base64: Optional[str], expression: str) -> SolutionResult:
        """Return the model's final answer for the user-edited expression, untruncated."""
        description = await self._ask(build_solve_prompt(expression), image_base64)
        LOGGER.info("GPT Response: %s", description)
        return SolutionResult(description=description)

    async def explain(self, image_base64: Optional[str]) -> SolutionResult:
        """Return the formatted walkthrough as a one-element step list."""
        raw = await self._ask(build_explain_prompt(), image_base64)
        return SolutionResult(steps=[format_steps(raw)])
