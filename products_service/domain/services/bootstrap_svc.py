import logging
import random

from products_service.core.config import Settings
from products_service.db import redis as r
from products_service.domain.exceptions import IndexUnavailableError, SeedingError, VerificationError
from products_service.domain.repositories.kv_store import KeyValueStore
from products_service.domain.repositories.product_repo import ProductRepo
from products_service.domain.repositories.product_search_repo import RediSearchIndex, SearchIndex
from products_service.domain.services.seeding_svc import CatalogSeeder, ProductFactory
from products_service.domain.services.verification_svc import verify_catalog


logger = logging.getLogger(__name__)


async def prepare_catalog(repo: ProductRepo, settings: Settings) -> None:
    """
    Seed then verify. Both failures are startup warnings: the service still
    starts and serves whatever the catalog holds.
    """
    rng = random.Random(settings.seed_random_seed) if settings.seed_random_seed is not None else None
    seeder = CatalogSeeder(
        repo,
        target=settings.seed_target,
        factory=ProductFactory(rng),
        write_batch_size=settings.seed_write_batch_size,
    )
    try:
        await seeder.run()
    except SeedingError as e:
        logger.warning("Failed to seed data: %s", e)

    try:
        await verify_catalog(repo, settings.seed_target)
    except VerificationError as e:
        logger.warning("Product data verification failed: %s", e)


async def open_catalog(settings: Settings) -> ProductRepo:
    """
    Startup sequence: connect (fatal on failure), probe the search module,
    ensure the index schema, build the repository, seed, verify.
    """
    client = await r.connect(settings.REDIS_URL)

    index: SearchIndex = await RediSearchIndex.detect(
        client,
        index_name=settings.SEARCH_INDEX_NAME,
        doc_prefix=settings.search_doc_prefix,
        key_prefix=settings.product_key_prefix,
    )
    try:
        await index.ensure_index()
    except IndexUnavailableError as e:
        logger.warning("Failed to create search index, continuing anyway: %s", e)

    repo = ProductRepo(
        KeyValueStore(client),
        index,
        key_prefix=settings.product_key_prefix,
        scan_batch_size=settings.seed_scan_batch_size,
    )
    await prepare_catalog(repo, settings)
    logger.info("Catalog ready search_enabled=%s", repo.search_enabled)
    return repo
