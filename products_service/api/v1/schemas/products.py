# api/v1/schemas/products.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from products_service.domain.models.product import Product


class ProductIn(BaseModel):
    name: str = Field(min_length=1, description="Product name (required)")
    description: str = ""
    price: float = Field(0.0, ge=0, description="Must be non-negative")
    category: str = ""
    stock: int = 0

    def to_domain(self) -> Product:
        return Product(**self.model_dump())


class ProductOut(BaseModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    stock: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductOut":
        return cls.model_validate(product.model_dump())


class ProductListOut(BaseModel):
    products: List[ProductOut]
    total: int
    page: int
    page_size: int
