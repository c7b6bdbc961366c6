# products_service/domain/repositories/product_repo.py

from __future__ import annotations
import logging
from typing import Optional, Set

from products_service.domain.exceptions import ProductNotFoundError
from products_service.domain.models.product import Product
from products_service.domain.repositories.kv_store import KeyValueStore
from products_service.domain.repositories.product_search_repo import SearchIndex
from products_service.domain.services.listing_svc import (
    IndexedListing,
    ListingPage,
    ScanListing,
    normalize_paging,
)

logger = logging.getLogger(__name__)


class ProductRepo:
    """
    Product catalog backed by one JSON record per key `<key_prefix><id>`.
    The store is the source of truth; the search index is an optional,
    best-effort projection used only for text queries.

    The listing path is resolved once here: text queries go to the index when it
    is enabled, to the scan otherwise. No internal locking; per-key atomicity
    is the store's.
    """

    def __init__(
        self,
        store: KeyValueStore,
        index: Optional[SearchIndex] = None,
        key_prefix: str = "product:",
        scan_batch_size: int = 1000,
    ):
        self.store = store
        self.index = index or SearchIndex()
        self.key_prefix = key_prefix
        self.scan_batch_size = scan_batch_size
        self._closed = False

        self._scan = ScanListing(store, key_prefix, scan_batch_size)
        self._text = IndexedListing(store, self.index) if self.index.enabled else self._scan

    @property
    def search_enabled(self) -> bool:
        return self.index.enabled

    def key_for(self, product_id: str) -> str:
        return f"{self.key_prefix}{product_id}"

    def id_for(self, key: str) -> str:
        return key[len(self.key_prefix):] if key.startswith(self.key_prefix) else key

    # ----- Operations --------------------------------------------------------

    async def create_product(self, product: Product) -> Product:
        """
        Write the record, then index it best-effort.
        Returns the stored product with its assigned id/created_at.
        """
        product = product.with_defaults()
        await self.store.put(self.key_for(product.id), product.to_record())
        await self.index.index_document(product)
        return product

    async def get_product(self, product_id: str) -> Product:
        key = self.key_for(product_id)
        try:
            raw = await self.store.get(key)
        except ProductNotFoundError:
            raise ProductNotFoundError(product_id) from None
        return Product.from_record(key, raw)

    async def list_products(
        self,
        page: int = 1,
        page_size: int = 10,
        category: str = "",
        search_query: str = "",
    ) -> ListingPage:
        page, page_size = normalize_paging(page, page_size)
        engine = self._text if search_query else self._scan
        return await engine.list(page, page_size, category=category or "", query=search_query or "")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.store.close()

    # ----- Catalog inspection (seeding / verification) -------------------------

    async def existing_ids(self) -> Set[str]:
        ids: Set[str] = set()
        async for batch in self.store.scan_by_prefix(self.key_prefix, self.scan_batch_size):
            ids.update(self.id_for(k) for k in batch)
        return ids

    async def count_products(self, stop_at: int = 0) -> int:
        """Distinct record keys; stops early once `stop_at` (> 0) is reached."""
        seen: Set[str] = set()
        async for batch in self.store.scan_by_prefix(self.key_prefix, self.scan_batch_size):
            seen.update(batch)
            if stop_at > 0 and len(seen) >= stop_at:
                break
        return len(seen)

    async def sample_product_id(self) -> Optional[str]:
        async for batch in self.store.scan_by_prefix(self.key_prefix, self.scan_batch_size):
            if batch:
                return self.id_for(batch[0])
        return None

    async def ping(self) -> bool:
        return await self.store.ping()
