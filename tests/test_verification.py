"""Tests for post-seeding verification and the startup sequence."""

import pytest
from unittest.mock import AsyncMock, patch

from products_service.core.config import Settings
from products_service.domain.exceptions import SeedingError, VerificationError
from products_service.domain.models.product import Product
from products_service.domain.repositories.product_repo import ProductRepo
from products_service.domain.services.bootstrap_svc import prepare_catalog
from products_service.domain.services.verification_svc import verify_catalog


class TestVerifyCatalog:

    @pytest.mark.asyncio
    async def test_passes_when_target_met(self, repo: ProductRepo) -> None:
        for i in range(3):
            await repo.create_product(Product(id=str(i), name=f"P{i}"))
        assert await verify_catalog(repo, target=3) == 3

    @pytest.mark.asyncio
    async def test_fails_below_target(self, repo: ProductRepo) -> None:
        await repo.create_product(Product(id="1", name="P1"))
        with pytest.raises(VerificationError, match="insufficient seed data"):
            await verify_catalog(repo, target=2)

    @pytest.mark.asyncio
    async def test_fails_on_empty_catalog_with_zero_target(self, repo: ProductRepo) -> None:
        with pytest.raises(VerificationError, match="no products found"):
            await verify_catalog(repo, target=0)

    @pytest.mark.asyncio
    async def test_fails_when_sample_unreadable(self, repo: ProductRepo, redis_client) -> None:
        await redis_client.set("product:bad", "garbage")
        with pytest.raises(VerificationError, match="failed to retrieve sample product"):
            await verify_catalog(repo, target=1)


class TestPrepareCatalog:

    @pytest.mark.asyncio
    async def test_seeds_and_verifies(self, repo: ProductRepo) -> None:
        settings = Settings(seed_target=5, seed_random_seed=11)
        await prepare_catalog(repo, settings)
        res = await repo.list_products(1, 10)
        assert res.total == 5

    @pytest.mark.asyncio
    async def test_seeding_failure_is_not_fatal(self, repo: ProductRepo) -> None:
        settings = Settings(seed_target=5)
        with patch(
            "products_service.domain.services.bootstrap_svc.CatalogSeeder.run",
            AsyncMock(side_effect=SeedingError("boom")),
        ):
            await prepare_catalog(repo, settings)  # verification fails too, only logged
        assert await repo.count_products() == 0
