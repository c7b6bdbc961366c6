"""Tests for create/get/close on the product repository."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError

from products_service.domain.exceptions import (
    ProductDecodeError,
    ProductNotFoundError,
    StoreUnavailableError,
)
from products_service.domain.models.product import Product
from products_service.domain.repositories.kv_store import KeyValueStore
from products_service.domain.repositories.product_repo import ProductRepo

from tests.fakes import FakeSearchIndex


class TestCreateProduct:

    @pytest.mark.asyncio
    async def test_assigns_id_and_created_at(self, repo: ProductRepo) -> None:
        created = await repo.create_product(Product(name="Desk", price=120.0, category="Furniture"))
        assert created.id
        assert created.created_at is not None

    @pytest.mark.asyncio
    async def test_keeps_caller_id_and_timestamp(self, repo: ProductRepo) -> None:
        ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        created = await repo.create_product(Product(id="abc", name="Desk", created_at=ts))
        assert created.id == "abc"
        assert created.created_at == ts

    @pytest.mark.asyncio
    async def test_record_key_and_field_names(self, repo: ProductRepo, redis_client) -> None:
        await repo.create_product(Product(id="abc", name="Desk", price=1.5, category="Furniture", stock=2))
        raw = (await redis_client.get("product:abc")).decode()
        for name in ('"id"', '"name"', '"description"', '"price"', '"category"', '"stock"', '"created_at"'):
            assert name in raw

    @pytest.mark.asyncio
    async def test_round_trip(self, repo: ProductRepo) -> None:
        created = await repo.create_product(
            Product(name="Kettle", description="Steel kettle", price=34.99, category="Home", stock=12)
        )
        assert await repo.get_product(created.id) == created

    @pytest.mark.asyncio
    async def test_indexes_created_product(self, indexed_repo: ProductRepo, search_index: FakeSearchIndex) -> None:
        created = await indexed_repo.create_product(Product(name="Kettle", price=34.99, category="Home"))
        assert search_index.docs[created.id]["category"] == "Home"

    @pytest.mark.asyncio
    async def test_index_failure_does_not_fail_create(
        self, indexed_repo: ProductRepo, search_index: FakeSearchIndex
    ) -> None:
        search_index.fail_writes = True
        created = await indexed_repo.create_product(Product(name="Kettle"))
        assert await indexed_repo.get_product(created.id) == created
        assert created.id not in search_index.docs

    @pytest.mark.asyncio
    async def test_store_failure_surfaces(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(side_effect=RedisConnectionError("down"))
        repo = ProductRepo(KeyValueStore(redis))
        with pytest.raises(StoreUnavailableError):
            await repo.create_product(Product(name="Kettle"))


class TestGetProduct:

    @pytest.mark.asyncio
    async def test_missing_id_is_not_found(self, repo: ProductRepo) -> None:
        with pytest.raises(ProductNotFoundError) as exc_info:
            await repo.get_product("missing-id")
        assert exc_info.value.product_id == "missing-id"

    @pytest.mark.asyncio
    async def test_corrupt_record_is_decode_error(self, repo: ProductRepo, redis_client) -> None:
        await redis_client.set("product:bad", "{not json")
        with pytest.raises(ProductDecodeError):
            await repo.get_product("bad")

    @pytest.mark.asyncio
    async def test_invalid_utf8_record_is_decode_error(self, repo: ProductRepo, redis_client) -> None:
        await redis_client.set("product:bad", b"\xff\xfe{}")
        with pytest.raises(ProductDecodeError):
            await repo.get_product("bad")

    @pytest.mark.asyncio
    async def test_unknown_fields_are_ignored(self, repo: ProductRepo, redis_client) -> None:
        await redis_client.set(
            "product:x",
            '{"id": "x", "name": "Lamp", "description": "", "price": 9.5, "category": "Home",'
            ' "stock": 1, "created_at": "2024-05-01T10:00:00Z", "color": "red"}',
        )
        product = await repo.get_product("x")
        assert product.name == "Lamp"
        assert product.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


class TestClose:

    @pytest.mark.asyncio
    async def test_close_is_safe_to_repeat(self) -> None:
        redis = MagicMock()
        redis.aclose = AsyncMock()
        repo = ProductRepo(KeyValueStore(redis))
        await repo.close()
        await repo.close()
        redis.aclose.assert_awaited_once()
