"""Environment-driven settings for the gateway process."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 5001
DEFAULT_VISION_BASE_URL = "https://api.together.xyz/v1"
DEFAULT_VISION_MODEL = "meta-llama/Llama-Vision-Free"
DEFAULT_SOLVER_MODEL = "gpt-4o-mini"
IMAGE_MODES = ("inline", "url")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} must be an integer") from exc


@dataclass
class AppConfig:
    """Runtime configuration resolved from environment variables.

    Attributes:
        port: Port the HTTP server listens on.
        public_base_url: Externally reachable address used to build image URLs.
        temp_dir: Directory holding short-lived images; must already exist.
        image_max_age_seconds: Age after which the sweep deletes a stored image.
        sweep_interval_seconds: Delay between two sweeps.
        max_body_bytes: Largest accepted request body.
        vision_api_key: Key for the vision provider.
        vision_base_url: OpenAI-compatible endpoint of the vision provider.
        vision_model: Model used to recognize expressions.
        recognition_image_mode: `inline` sends a data URL, `url` sends an Image Store URL.
        openai_api_key: Key for the language-model provider.
        solver_model: Model used for solving and step-by-step explanations.
    """

    port: int = DEFAULT_PORT
    public_base_url: Optional[str] = None
    temp_dir: Path = BASE_DIR / "temp"
    image_max_age_seconds: int = 3_600
    sweep_interval_seconds: int = 3_600
    max_body_bytes: int = 50 * 1024 * 1024
    vision_api_key: Optional[str] = None
    vision_base_url: str = DEFAULT_VISION_BASE_URL
    vision_model: str = DEFAULT_VISION_MODEL
    recognition_image_mode: str = "inline"
    openai_api_key: Optional[str] = None
    solver_model: str = DEFAULT_SOLVER_MODEL

    def __post_init__(self) -> None:
        if self.recognition_image_mode not in IMAGE_MODES:
            raise RuntimeError(
                f"RECOGNITION_IMAGE_MODE must be one of {', '.join(IMAGE_MODES)}, "
                f"got {self.recognition_image_mode!r}"
            )
        if not self.public_base_url:
            self.public_base_url = f"http://localhost:{self.port}"
        self.public_base_url = self.public_base_url.rstrip("/")
        self.temp_dir = Path(self.temp_dir).expanduser()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build the configuration from the current process environment."""
        port = _env_int("PORT", DEFAULT_PORT)
        return cls(
            port=port,
            public_base_url=os.getenv("PUBLIC_BASE_URL"),
            temp_dir=Path(os.getenv("TEMP_DIR") or BASE_DIR / "temp"),
            image_max_age_seconds=_env_int("IMAGE_MAX_AGE_SECONDS", 3_600),
            sweep_interval_seconds=_env_int("SWEEP_INTERVAL_SECONDS", 3_600),
            max_body_bytes=_env_int("MAX_BODY_BYTES", 50 * 1024 * 1024),
            vision_api_key=os.getenv("VISION_API_KEY") or os.getenv("TOGETHER_API_KEY"),
            vision_base_url=os.getenv("VISION_BASE_URL", DEFAULT_VISION_BASE_URL),
            vision_model=os.getenv("VISION_MODEL", DEFAULT_VISION_MODEL),
            recognition_image_mode=(os.getenv("RECOGNITION_IMAGE_MODE") or "inline").strip().lower(),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            solver_model=os.getenv("SOLVER_MODEL", DEFAULT_SOLVER_MODEL),
        )
