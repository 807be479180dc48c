"""
FastAPI app for the whereami service.

GET /      -> HTML page with the location (and an image when one is found)
GET /ping  -> "pong"
"""

import asyncio
from contextlib import asynccontextmanager
import logging
from logging.handlers import RotatingFileHandler
import os
import sys
import time
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from whereami import __version__
from whereami.config import Settings, load_settings
from whereami.services.http import create_session
from whereami.services.image_service import ImageLookupService, resolve_image_search_config
from whereami.services.location_pipeline import LocationResolutionPipeline, build_resolver_chain
from whereami.services.metadata_client import MetadataClient, detect_environment
from whereami.services.model_assembler import RequestModelAssembler
from whereami.views import UNKNOWN_LOCATION_TEXT, render_index

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """
    Send application logs to the console and to a rotating file.

    Safe to call more than once; handlers are only attached the first time.
    """
    app_logger = logging.getLogger("whereami")
    if getattr(app_logger, "_whereami_configured", False):
        return

    app_logger.setLevel(settings.log_level)

    # Console, styled to stand out from uvicorn's own lines
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        '\033[96m%(asctime)s\033[0m - %(name)s - \033[93m%(levelname)s\033[0m - %(message)s',
        datefmt='%H:%M:%S'
    ))
    app_logger.addHandler(console_handler)

    os.makedirs(settings.log_dir, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(settings.log_dir, "whereami.log"),
        maxBytes=10*1024*1024,  # 10MB per file, keep 5 backups
        backupCount=5,
    )
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    app_logger.addHandler(file_handler)

    app_logger.propagate = False
    app_logger._whereami_configured = True


def build_assembler(settings: Settings) -> RequestModelAssembler:
    """Wire the location pipeline and image service for this environment."""
    environment = detect_environment(settings)
    logger.info(f"Running in environment: {environment.value}")

    session = create_session()
    metadata = MetadataClient(settings.metadata_url, settings.metadata_timeout, session=session)

    pipeline = LocationResolutionPipeline(
        build_resolver_chain(environment, settings, metadata=metadata, session=session)
    )
    images = ImageLookupService(
        resolve_image_search_config(settings, metadata, environment),
        settings.http_timeout,
        session=session,
    )
    return RequestModelAssembler(pipeline, images)


def get_assembler(request: Request) -> RequestModelAssembler:
    """Dependency: the assembler built at startup."""
    return request.app.state.assembler


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = load_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=" * 60)
        logger.info(f"whereami {__version__} starting")
        logger.info("=" * 60)
        # Metadata attribute reads block; keep them off the event loop
        app.state.assembler = await asyncio.to_thread(build_assembler, settings)
        yield

    app = FastAPI(
        title="whereami",
        description="Where is this app running, and where is its visitor?",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Call logging and default headers."""
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["Server"] = "whereami"
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)")
        return response

    @app.get("/", response_class=HTMLResponse)
    async def index(assembler: RequestModelAssembler = Depends(get_assembler)):
        """Location page. Always 200: full, location-only, or unknown."""
        try:
            model = await assembler.assemble()
        except Exception:
            logger.exception("Unexpected error assembling the page model")
            model = None

        if model is None:
            return PlainTextResponse(UNKNOWN_LOCATION_TEXT)
        return HTMLResponse(render_index(model))

    @app.get("/ping", response_class=PlainTextResponse)
    async def ping():
        """Health check."""
        return "pong"

    return app


app = create_app()
