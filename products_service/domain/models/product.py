from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
import time

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from products_service.domain.exceptions import ProductDecodeError, ProductMarshalError


class Product(BaseModel):
    """
    Catalog record. Persisted as JSON under `product:<id>`; field names are kept
    in the stored form so records stay readable when fields are added.
    """
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""
    stock: int = 0
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}  # immuable = safe

    def with_defaults(self) -> "Product":
        """Return a copy with a server-assigned id and creation time where missing."""
        update: dict = {}
        if not self.id:
            update["id"] = str(time.time_ns())
        if self.created_at is None:
            update["created_at"] = datetime.now(timezone.utc)
        return self.model_copy(update=update) if update else self

    def to_record(self) -> str:
        try:
            return self.model_dump_json()
        except PydanticSerializationError as e:
            raise ProductMarshalError(f"failed to marshal product {self.id}: {e}") from e

    @classmethod
    def from_record(cls, key: str, raw: str | bytes) -> "Product":
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise ProductDecodeError(key, str(e.errors(include_url=False)[:1])) from e

    def index_fields(self) -> dict:
        """Flat projection written to the search index."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "stock": self.stock,
        }
