import asyncio
import inspect
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.inference_route import router as inference_router
from services.image_store import STATIC_ROUTE, ImageStore
from utils.app_config import AppConfig
from utils.body_limit import BodySizeLimitMiddleware
from utils.errors import ApiError, api_error_handler, validation_error_handler

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


async def _close_client(client) -> None:
    """Close an async client if it exposes a close/aclose method."""
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception as exc:
        LOGGER.warning("Error while closing client %r: %s", client, exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the vision provider client (OpenAI-compatible endpoint)
      - the OpenAI language-model client
      - the image store and its periodic sweep task
    and attach them to `app.state`.
    """
    config: AppConfig = app.state.config

    # Clients attached before startup (e.g. in tests) are kept as-is.
    build_vision = getattr(app.state, "vision_client", None) is None
    build_llm = getattr(app.state, "llm_client", None) is None

    if build_vision and not config.vision_api_key:
        raise RuntimeError("VISION_API_KEY (or TOGETHER_API_KEY) environment variable is not set")
    if build_llm and not config.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")

    try:
        if build_vision:
            app.state.vision_client = AsyncOpenAI(api_key=config.vision_api_key, base_url=config.vision_base_url)
        if build_llm:
            app.state.llm_client = AsyncOpenAI(api_key=config.openai_api_key)
    except Exception as exc:
        raise RuntimeError("Failed to initialize provider clients") from exc

    if not config.temp_dir.is_dir():
        LOGGER.warning("Temp directory %s does not exist; stored images cannot be written", config.temp_dir)

    image_store = ImageStore(
        config.temp_dir,
        config.public_base_url,
        max_age_seconds=config.image_max_age_seconds,
    )
    app.state.image_store = image_store
    sweep_task = asyncio.create_task(image_store.run_periodic_sweep(config.sweep_interval_seconds))
    app.state.sweep_task = sweep_task
    LOGGER.info("Server is running on port %d", config.port)

    try:
        yield
    finally:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass
        for name in ("vision_client", "llm_client"):
            client = getattr(app.state, name, None)
            if client is not None:
                await _close_client(client)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    config = config or AppConfig.from_env()
    app = FastAPI(lifespan=lifespan)
    app.state.config = config

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # The directory may be created after startup, so it is not checked here.
    app.mount(STATIC_ROUTE, StaticFiles(directory=config.temp_dir, check_dir=False), name="temp")

    @app.get("/test")
    async def test():
        """Liveness probe."""
        LOGGER.info("Test endpoint hit")
        return {"status": "Server is running"}

    @app.get("/health")
    async def health(request: Request):
        """
        Report whether provider clients are attached and the temp directory exists.
        """
        state = request.app.state
        return {
            "ok": True,
            "vision_available": getattr(state, "vision_client", None) is not None,
            "llm_available": getattr(state, "llm_client", None) is not None,
            "temp_dir_exists": config.temp_dir.is_dir(),
        }

    # Register application routers
    app.include_router(inference_router)

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=app.state.config.port)
