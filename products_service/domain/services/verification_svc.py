import logging
import time

from products_service.domain.exceptions import CatalogError, VerificationError
from products_service.domain.repositories.product_repo import ProductRepo

logger = logging.getLogger(__name__)


async def verify_catalog(repo: ProductRepo, target: int) -> int:
    """
    Post-seeding sanity check:
    - the catalog holds at least `target` records (key listing, stops at target)
    - one sample record is readable end-to-end by id
    Returns the counted size. Raises VerificationError; callers treat it as a warning.
    """
    t0 = time.perf_counter()
    try:
        total = await repo.count_products(stop_at=target)
    except CatalogError as e:
        raise VerificationError(f"failed to count products: {e}") from e

    if total < target:
        raise VerificationError(f"insufficient seed data: have {total} products, expected at least {target}")

    try:
        sample_id = await repo.sample_product_id()
    except CatalogError as e:
        raise VerificationError(f"failed to scan for sample product: {e}") from e
    if not sample_id:
        raise VerificationError("no products found after seeding")

    try:
        await repo.get_product(sample_id)
    except CatalogError as e:
        raise VerificationError(f"failed to retrieve sample product {sample_id}: {e}") from e

    logger.info("Verified product catalog count=%s sample=%s time=%.3fs", total, sample_id, time.perf_counter() - t0)
    return total
