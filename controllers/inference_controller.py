"""Controller wiring the inference handlers to shared clients on `app.state`."""

from typing import Any, Dict, Optional

from fastapi import Request

from services.openai.expression_recognizer import ExpressionRecognizer
from services.openai.solution_service import SolutionService
from utils.errors import ApiError


def _get_state(request: Request, name: str, label: str) -> Any:
    """Retrieve a shared resource from the app state or fail with a 500."""
    value = getattr(request.app.state, name, None)
    if value is None:
        raise ApiError(500, f"{label} not initialized", f"{label} is not available on this server.")
    return value


async def recognize_expression(request: Request, image_base64: Optional[str]) -> Dict[str, Any]:
    """Recognize the drawn expression and return the success envelope.

    Args:
        request: FastAPI Request (used to access app.state for shared clients).
        image_base64: Base64 image, optionally data-URL prefixed.

    Returns:
        `{kind: "success", success: True, text}` with text truncated to ten characters.
    """
    config = _get_state(request, "config", "Configuration")
    recognizer = ExpressionRecognizer(
        _get_state(request, "vision_client", "Vision client"),
        model=config.vision_model,
        image_mode=config.recognition_image_mode,
        image_store=getattr(request.app.state, "image_store", None),
    )
    result = await recognizer.recognize(image_base64)
    return result.to_dict()


async def solve_expression(request: Request, image_base64: Optional[str], ocr_text: str) -> Dict[str, Any]:
    """Return `{description}` holding the model's final answer."""
    config = _get_state(request, "config", "Configuration")
    service = SolutionService(_get_state(request, "llm_client", "OpenAI client"), model=config.solver_model)
    result = await service.solve(image_base64, ocr_text)
    return result.to_dict()


async def explain_solution(request: Request, image_base64: Optional[str]) -> Dict[str, Any]:
    """Return `{steps: [text]}` holding the formatted walkthrough."""
    config = _get_state(request, "config", "Configuration")
    service = SolutionService(_get_state(request, "llm_client", "OpenAI client"), model=config.solver_model)
    result = await service.explain(image_base64)
    return result.to_dict()
