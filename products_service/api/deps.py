# products_service/api/deps.py
from fastapi import Request
from products_service.domain.repositories.product_repo import ProductRepo

# Dependency for injecting the catalog repository built at startup
def catalog_repo(request: Request) -> ProductRepo:
    return request.app.state.catalog
