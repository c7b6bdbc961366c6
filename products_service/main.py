from fastapi import FastAPI
from products_service.core.config import get_settings
from products_service.core.lifespan import lifespan
from products_service.api.v1.routers.products import router as products_router
from products_service.api.v1.routers.health import router as health_router
from products_service.core.logging import configure_logging

import logging

settings = get_settings()
configure_logging(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    log_file=settings.LOG_FILE_PATH,
)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- Routes -------
app.include_router(health_router, prefix=settings.api_prefix)
app.include_router(products_router, prefix=settings.api_prefix)   # list / get / create
