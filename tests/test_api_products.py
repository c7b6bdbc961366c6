"""Tests for the HTTP endpoints (repository mocked)."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from products_service.api.deps import catalog_repo
from products_service.api.v1.routers.products import clamp_paging
from products_service.domain.exceptions import ProductNotFoundError, SearchFailedError
from products_service.domain.models.product import Product
from products_service.domain.repositories.product_repo import ProductRepo
from products_service.domain.services.listing_svc import ListingPage
from products_service.main import app

LAPTOP = Product(
    id="seed-1",
    name="Laptop Pro 15",
    description="High-performance laptop",
    price=1299.99,
    category="Electronics",
    stock=50,
    created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
)


@pytest.fixture
def mock_repo() -> MagicMock:
    repo = MagicMock(spec=ProductRepo)
    repo.list_products = AsyncMock(return_value=ListingPage(products=[LAPTOP], total=1))
    repo.get_product = AsyncMock(return_value=LAPTOP)
    repo.create_product = AsyncMock(side_effect=lambda p: p.with_defaults())
    repo.ping = AsyncMock(return_value=True)
    repo.search_enabled = False
    return repo


@pytest.fixture
def client(mock_repo: MagicMock):
    app.dependency_overrides[catalog_repo] = lambda: mock_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestListProducts:

    def test_list(self, client: TestClient, mock_repo: MagicMock) -> None:
        response = client.get("/products", params={"page": 1, "page_size": 5, "category": "Electronics"})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["page"] == 1
        assert body["page_size"] == 5
        assert body["products"][0]["id"] == "seed-1"
        mock_repo.list_products.assert_awaited_once_with(1, 5, "Electronics", "")

    def test_paging_is_clamped(self, client: TestClient, mock_repo: MagicMock) -> None:
        response = client.get("/products", params={"page": -2, "page_size": 1000, "q": "laptop"})
        assert response.status_code == 200
        assert response.json()["page_size"] == 100
        mock_repo.list_products.assert_awaited_once_with(1, 100, "", "laptop")

    def test_zero_page_size_defaults(self, client: TestClient, mock_repo: MagicMock) -> None:
        client.get("/products", params={"page_size": 0})
        mock_repo.list_products.assert_awaited_once_with(1, 10, "", "")

    def test_search_failure_is_500(self, client: TestClient, mock_repo: MagicMock) -> None:
        mock_repo.list_products = AsyncMock(side_effect=SearchFailedError("search failed"))
        assert client.get("/products", params={"q": "x"}).status_code == 500


class TestGetProduct:

    def test_get(self, client: TestClient) -> None:
        response = client.get("/products/seed-1")
        assert response.status_code == 200
        assert response.json()["name"] == "Laptop Pro 15"

    def test_not_found(self, client: TestClient, mock_repo: MagicMock) -> None:
        mock_repo.get_product = AsyncMock(side_effect=ProductNotFoundError("missing-id"))
        assert client.get("/products/missing-id").status_code == 404


class TestCreateProduct:

    def test_create_assigns_id(self, client: TestClient) -> None:
        response = client.post("/products", json={"name": "Desk", "price": 150.0, "category": "Furniture"})
        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["created_at"]
        assert body["category"] == "Furniture"

    def test_name_required(self, client: TestClient) -> None:
        assert client.post("/products", json={"name": "", "price": 1.0}).status_code == 422

    def test_negative_price_rejected(self, client: TestClient) -> None:
        assert client.post("/products", json={"name": "Desk", "price": -1}).status_code == 422


class TestHealth:

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["checks"]["redis"] == "ok"
        assert body["checks"]["search_index"] == "disabled"


class TestClampPaging:

    def test_defaults_then_caps(self) -> None:
        assert clamp_paging(0, 0, 100) == (1, 10)
        assert clamp_paging(3, 250, 100) == (3, 100)
        assert clamp_paging(2, 40, 100) == (2, 40)
