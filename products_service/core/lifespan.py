# products_service/core/lifespan.py
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from products_service.core.config import get_settings
from products_service.domain.services.bootstrap_svc import open_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Record store is mandatory: a failed connection aborts startup.
    # Seeding / verification problems are only logged by open_catalog.
    try:
        app.state.catalog = await open_catalog(settings)
    except Exception as e:
        logger.error("Catalog startup failed: %s", e)
        raise

    # Application runs
    yield

    # --- Shutdown ---
    await app.state.catalog.close()
    logger.info("Redis disconnected")
