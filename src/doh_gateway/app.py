"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from doh_gateway.api.healthcheck import router as healthcheck_router
from doh_gateway.api.routes import router
from doh_gateway.core.config import get_settings
from doh_gateway.utils.decorators import init_sentry

# Configure logging for the application
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan handler."""
    # Startup
    init_sentry()
    settings = get_settings()
    logging.getLogger("doh_gateway").setLevel(settings.log_level.upper())

    logger.info("DoH gateway starting...")
    logger.info(f"Upstream: {settings.upstream}")
    logger.info(f"TLS: {'enabled' if settings.use_tls else 'disabled'}")
    logger.info(f"Sentry: {'enabled' if settings.sentry_dsn else 'disabled'}")

    yield

    # Shutdown
    logger.info("DoH gateway shutting down...")


app = FastAPI(
    title="DoH Gateway",
    description="DNS over HTTPS (JSON API) to classic DNS gateway",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routes
app.include_router(router)
app.include_router(healthcheck_router)
