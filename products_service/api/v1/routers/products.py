# products_service/api/v1/routers/products.py

from fastapi import APIRouter, Depends, Query, HTTPException, status
from typing import Optional

from products_service.api.deps import catalog_repo
from products_service.api.v1.schemas.products import ProductIn, ProductListOut, ProductOut
from products_service.core.config import get_settings
from products_service.domain.exceptions import CatalogError, ProductNotFoundError
from products_service.domain.repositories.product_repo import ProductRepo
from products_service.domain.services.listing_svc import normalize_paging

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


def clamp_paging(page: int, page_size: int, max_page_size: int) -> tuple[int, int]:
    page, page_size = normalize_paging(page, page_size)
    return page, min(page_size, max_page_size)


@router.get("/products", response_model=ProductListOut, summary="List products (paginated, filterable, searchable)")
async def list_products(
    page: int = Query(1, description="1-based page number; values < 1 mean 1"),
    page_size: int = Query(10, description="Items per page; clamped to the configured maximum"),
    category: Optional[str] = Query(None, description="Exact category match"),
    q: Optional[str] = Query(None, description="Free-text search over name and description"),
    repo: ProductRepo = Depends(catalog_repo),
):
    page, page_size = clamp_paging(page, page_size, get_settings().max_page_size)
    logger.info(f"Request: list_products page={page} page_size={page_size} category={category!r} q={q!r}")
    try:
        res = await repo.list_products(page, page_size, category or "", q or "")
    except CatalogError as e:
        logger.error("Failed to list products: %s", e)
        raise HTTPException(status_code=500, detail=f"failed to list products: {e}")
    logger.info(f"Response: list_products returned={len(res.products)} total={res.total}")
    return ProductListOut(
        products=[ProductOut.from_domain(p) for p in res.products],
        total=res.total,
        page=page,
        page_size=page_size,
    )


@router.get("/products/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, repo: ProductRepo = Depends(catalog_repo)):
    try:
        product = await repo.get_product(product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail=f"product not found: {product_id}")
    except CatalogError as e:
        logger.error("Failed to get product id=%s err=%s", product_id, e)
        raise HTTPException(status_code=500, detail=f"failed to get product: {e}")
    return ProductOut.from_domain(product)


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductIn, repo: ProductRepo = Depends(catalog_repo)):
    """
    Store a new product. The server assigns `id` and `created_at`.
    """
    try:
        product = await repo.create_product(body.to_domain())
    except CatalogError as e:
        logger.error("Failed to create product: %s", e)
        raise HTTPException(status_code=500, detail=f"failed to create product: {e}")
    logger.info(f"Response: create_product id={product.id}")
    return ProductOut.from_domain(product)
