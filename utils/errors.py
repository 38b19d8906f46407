"""Error types and the JSON error envelope returned by the API."""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class GatewayError(RuntimeError):
    """Raised when a hosted model reply is missing or malformed."""


class ImagePayloadError(ValueError):
    """Raised when an image payload is absent or cannot be decoded."""


class ApiError(Exception):
    """Exception carrying an HTTP status and the `{error, details}` envelope."""

    def __init__(
        self,
        status_code: int,
        error: str,
        details: str,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(details)
        self.status_code = status_code
        self.error = error
        self.details = details
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = dict(self.extra)
        body["error"] = self.error
        body["details"] = self.details
        return body


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as a JSON response."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body validation failures with the same envelope as other errors."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{location}: {err.get('msg', 'invalid value')}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": "; ".join(messages) or "Malformed request."},
    )
