# app/core/lifespan.py
from contextlib import asynccontextmanager
from app.config import settings
from app.services.exporter import SUPPORTED_FORMATS
from app.utils.logging import logger


@asynccontextmanager
async def lifespan(app):
    """Run setup and teardown logic for the app lifecycle."""

    # ---------- Startup ----------
    logger.info("Application starting", extra={
        "environment": settings.environment,
        "export_delivery": settings.export_delivery,
        "export_dir": str(settings.export_dir),
        "formats": sorted(fmt.value for fmt in SUPPORTED_FORMATS),
    })

    if settings.exports_use_r2 and not settings.r2_configured:
        logger.warning("EXPORTS_USE_R2 is set but R2 credentials are incomplete; url delivery will stream instead")

    # yield control to the running app
    yield

    # ---------- Shutdown ----------
    logger.info("Application shutting down")
