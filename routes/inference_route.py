"""FastAPI routes for recognition, solving, and step-by-step explanations."""

import logging
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from controllers.inference_controller import explain_solution, recognize_expression, solve_expression
from models.results import RecognitionFailure
from utils.errors import ApiError

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["inference"])


class VisionRequest(BaseModel):
    imageBase64: Optional[str] = None


class CalculateRequest(BaseModel):
    imageBase64: Optional[str] = None
    ocrText: str = ""


class SolveStepsRequest(BaseModel):
    imageBase64: Optional[str] = None


@router.post("/vision")
async def post_vision(request: Request, payload: VisionRequest):
    """Recognize the handwritten expression in the submitted image."""
    LOGGER.info("Vision endpoint hit")
    try:
        return await recognize_expression(request, payload.imageBase64)
    except ApiError:
        raise
    except ValueError as exc:
        failure = RecognitionFailure(message=str(exc))
        raise ApiError(400, "Invalid image payload", str(exc), extra=failure.to_dict()) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        LOGGER.error("Vision request failed: %s", exc)
        failure = RecognitionFailure(message=str(exc) or exc.__class__.__name__)
        raise ApiError(500, "Failed to process vision request", failure.message, extra=failure.to_dict()) from exc


@router.post("/calculate")
async def post_calculate(request: Request, payload: CalculateRequest):
    """Solve the user-edited expression, using the image as supporting context."""
    try:
        return await solve_expression(request, payload.imageBase64, payload.ocrText)
    except ApiError:
        raise
    except ValueError as exc:
        raise ApiError(400, "Invalid image payload", str(exc)) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        LOGGER.error("GPT Error: %s", exc)
        raise ApiError(500, "Failed to process calculation", str(exc) or exc.__class__.__name__) from exc


@router.post("/solve-steps")
async def post_solve_steps(request: Request, payload: SolveStepsRequest):
    """Return a numbered walkthrough of the solution."""
    try:
        return await explain_solution(request, payload.imageBase64)
    except ApiError:
        raise
    except ValueError as exc:
        raise ApiError(400, "Invalid image payload", str(exc)) from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        LOGGER.error("Step-by-step solution failed: %s", exc)
        raise ApiError(500, "Failed to generate solution steps", str(exc) or exc.__class__.__name__) from exc
