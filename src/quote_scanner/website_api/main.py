"""FastAPI application factory for the quote scanner API."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .config import settings
from .middleware.cors import ALLOWED_ORIGINS
from .routes.health import router as health_router
from .routes.leads import router as leads_router
from .routes.scans import router as scans_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Quote Scanner API")
    if settings.debug:
        logging.getLogger("quote_scanner").setLevel(logging.DEBUG)

    if settings.gemini_api_key:
        logger.info(f"Signal provider: gemini ({', '.join(settings.gemini_models)})")
    elif settings.use_mock_provider:
        logger.info("Signal provider: mock")

    yield

    logger.info("Quote Scanner API shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Quote Scanner API",
        description="Quote trust scoring and lead valuation for the window/door quote funnel",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Routes
    app.include_router(health_router)
    app.include_router(scans_router)
    app.include_router(leads_router)

    return app


# Module-level app instance for uvicorn
app = create_app()
