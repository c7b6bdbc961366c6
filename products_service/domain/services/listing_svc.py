from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from products_service.domain.exceptions import ProductDecodeError
from products_service.domain.models.product import Product
from products_service.domain.repositories.kv_store import KeyValueStore
from products_service.domain.repositories.product_search_repo import SearchIndex
from products_service.domain.services.constants import DEFAULT_PAGE_SIZE, SORT_FIELD, SORT_DESC

logger = logging.getLogger(__name__)


@dataclass
class ListingPage:
    products: List[Product] = field(default_factory=list)
    total: int = 0   # full match count, never the page length


def normalize_paging(page: int, page_size: int) -> Tuple[int, int]:
    """The repository defends its own paging invariants whatever the caller did."""
    if page < 1:
        page = 1
    if page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def matches(product: Product, category: str, query_lower: str) -> bool:
    if category and product.category != category:
        return False
    if query_lower:
        return query_lower in product.name.lower() or query_lower in product.description.lower()
    return True


def decode_batch(keys: Sequence[str], raws: Sequence[Optional[bytes]]) -> List[Product]:
    """Decode fetched records; absent or corrupt ones are logged and skipped."""
    out: List[Product] = []
    for key, raw in zip(keys, raws):
        if raw is None:
            logger.warning("Failed to get product key=%s err=missing", key)
            continue
        try:
            out.append(Product.from_record(key, raw))
        except ProductDecodeError as e:
            logger.warning("Failed to unmarshal product key=%s err=%s", key, e)
    return out


class ScanListing:
    """
    Full-scan path: enumerate every record key, decode, filter in memory.
    Total is exact for the snapshot of keys seen by this pass.
    """

    def __init__(self, store: KeyValueStore, key_prefix: str, batch_size: int = 1000):
        self.store = store
        self.key_prefix = key_prefix
        self.batch_size = batch_size

    async def list(self, page: int, page_size: int, category: str = "", query: str = "") -> ListingPage:
        t0 = time.perf_counter()
        query_lower = query.lower()
        seen: set[str] = set()
        filtered: List[Product] = []

        async for batch in self.store.scan_by_prefix(self.key_prefix, self.batch_size):
            fresh = [k for k in batch if k not in seen]
            seen.update(fresh)
            if not fresh:
                continue
            raws = await self.store.get_many(fresh)
            filtered.extend(p for p in decode_batch(fresh, raws) if matches(p, category, query_lower))

        # canonical order shared with the indexed path: price desc, id as tiebreak
        filtered.sort(key=lambda p: (-p.price if SORT_DESC else p.price, p.id or ""))

        total = len(filtered)
        start = (page - 1) * page_size
        items = [] if start >= total else filtered[start:min(start + page_size, total)]
        logger.debug(
            "scan_listing keys=%s matched=%s page=%s returned=%s time=%.3fs",
            len(seen), total, page, len(items), time.perf_counter() - t0,
        )
        return ListingPage(products=items, total=total)


class IndexedListing:
    """
    Search path: the index filters, sorts and paginates; records are re-read from the store.
    A failing search raises SearchFailedError, it never degrades to scanning.
    """

    def __init__(self, store: KeyValueStore, index: SearchIndex):
        self.store = store
        self.index = index

    async def list(self, page: int, page_size: int, category: str = "", query: str = "") -> ListingPage:
        t0 = time.perf_counter()
        result = await self.index.search(
            query,
            category=category,
            sort_field=SORT_FIELD,
            sort_desc=SORT_DESC,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        raws = await self.store.get_many(result.keys)
        items = decode_batch(result.keys, raws)
        logger.debug(
            "indexed_listing q=%r category=%r total=%s returned=%s time=%.3fs",
            query, category, result.total, len(items), time.perf_counter() - t0,
        )
        return ListingPage(products=items, total=result.total)
