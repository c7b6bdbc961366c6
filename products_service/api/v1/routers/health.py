# products_service/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter, Depends
from products_service.api.deps import catalog_repo
from products_service.core.config import get_settings
from products_service.domain.exceptions import CatalogError
from products_service.domain.repositories.product_repo import ProductRepo

router = APIRouter()
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@router.get("/health")
async def health(repo: ProductRepo = Depends(catalog_repo)):
    """
    Health check:
    - ping the record store
    - report whether the search index is in use (disabled is not an error)
    """
    settings = get_settings()
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha(),
        "uptime_seconds": int(time.time() - START_TIME),
        "search_index": "enabled" if repo.search_enabled else "disabled",
    }

    try:
        await repo.ping()
        checks["redis"] = "ok"
    except CatalogError as e:
        checks["redis"] = f"error: {e}"

    status = "ok" if checks["redis"] == "ok" else "error"
    return {"status": status, "checks": checks, "timestamp": int(time.time())}
