"""Result records exchanged between the gateway services and the API layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class StoredImage:
    """A short-lived image written by the Image Store.

    Attributes:
        filename: Generated name (prefix plus high-resolution timestamp).
        filepath: Location on local disk.
        created_at: File modification time as a Unix timestamp.
        url: Externally addressable location served under `/temp`.
    """

    filename: str
    filepath: str
    created_at: float
    url: str


@dataclass
class RecognitionSuccess:
    """Recognized expression text, already truncated."""

    text: str
    kind: str = field(default="success", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "success": True, "text": self.text}


@dataclass
class RecognitionFailure:
    """Recognition that could not be completed."""

    message: str
    kind: str = field(default="error", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "success": False, "message": self.message}


RecognitionResult = Union[RecognitionSuccess, RecognitionFailure]


@dataclass
class SolutionResult:
    """Final answer or formatted step-by-step walkthrough."""

    description: Optional[str] = None
    steps: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.steps is not None:
            return {"steps": list(self.steps)}
        return {"description": self.description or ""}
