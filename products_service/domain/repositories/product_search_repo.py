# products_service/domain/repositories/product_search_repo.py
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional
from redis.asyncio import Redis
from redis.exceptions import RedisError, ResponseError
from redis.commands.search.field import NumericField, TagField, TextField
from redis.commands.search.index_definition import IndexDefinition, IndexType
from redis.commands.search.query import Query

from products_service.domain.exceptions import IndexUnavailableError, SearchFailedError
from products_service.domain.models.product import Product

logger = logging.getLogger(__name__)

# RediSearch tag syntax: these must be backslash-escaped inside @field:{...}
_TAG_SPECIALS = re.compile(r"([,.<>{}\[\]\"':;!@#$%^&*()\-+=~|/\\\s])")


def escape_tag(value: str) -> str:
    return _TAG_SPECIALS.sub(r"\\\1", value)


@dataclass
class SearchPage:
    keys: List[str] = field(default_factory=list)   # store keys, index order
    total: int = 0                                  # size of the full match set


class SearchIndex:
    """
    Disabled variant: what the repository holds when no search module was detected.
    Writes are no-ops, queries are refused.
    """

    enabled = False

    async def ensure_index(self) -> None:
        return None

    async def index_document(self, product: Product) -> bool:
        return False

    async def search(
        self,
        query_text: str,
        category: str = "",
        sort_field: str = "price",
        sort_desc: bool = True,
        offset: int = 0,
        limit: int = 10,
    ) -> SearchPage:
        raise IndexUnavailableError("search index is disabled")


class RediSearchIndex(SearchIndex):
    """
    RediSearch secondary index over hash documents `<doc_prefix><id>`.
    Advisory projection of the record store: it may lag, writes are best-effort.
    """

    enabled = True

    def __init__(self, redis: Redis, index_name: str, doc_prefix: str, key_prefix: str):
        self.redis = redis
        self.index_name = index_name
        self.doc_prefix = doc_prefix
        self.key_prefix = key_prefix

    @classmethod
    async def detect(cls, redis: Redis, index_name: str, doc_prefix: str, key_prefix: str) -> SearchIndex:
        """
        Probe once for the search module. On failure return the disabled variant;
        there is no retry for the lifetime of the repository.
        """
        try:
            await redis.execute_command("FT._LIST")
        except (RedisError, OSError) as e:
            logger.warning("RediSearch module not available; search features disabled (%s)", e)
            return SearchIndex()
        logger.info("RediSearch detected, index=%s", index_name)
        return cls(redis, index_name, doc_prefix, key_prefix)

    def _ft(self):
        return self.redis.ft(self.index_name)

    def doc_id(self, product_id: str) -> str:
        return f"{self.doc_prefix}{product_id}"

    def store_key(self, doc_id: str) -> str:
        product_id = doc_id[len(self.doc_prefix):] if doc_id.startswith(self.doc_prefix) else doc_id
        return f"{self.key_prefix}{product_id}"

    async def ensure_index(self) -> None:
        schema = (
            TextField("name"),
            TextField("description"),
            TagField("category"),
            NumericField("price", sortable=True),
            NumericField("stock"),
        )
        definition = IndexDefinition(prefix=[self.doc_prefix], index_type=IndexType.HASH)
        try:
            await self._ft().create_index(schema, definition=definition)
            logger.info("Created search index %s", self.index_name)
        except ResponseError as e:
            if "already exists" in str(e).lower():
                logger.debug("Search index %s already exists", self.index_name)
                return
            raise IndexUnavailableError(f"failed to create index {self.index_name}: {e}") from e
        except RedisError as e:
            raise IndexUnavailableError(f"failed to create index {self.index_name}: {e}") from e

    async def index_document(self, product: Product) -> bool:
        """Upsert the hash document. Failures are logged, never raised."""
        key = self.doc_id(product.id)
        try:
            await self.redis.hset(key, mapping=product.index_fields())
        except RedisError as e:
            logger.warning("Failed to index product key=%s err=%s", key, e)
            return False
        return True

    def build_query(
        self,
        query_text: str,
        category: str = "",
        sort_field: str = "price",
        sort_desc: bool = True,
        offset: int = 0,
        limit: int = 10,
    ) -> Query:
        text = query_text
        if category:
            text = f"({query_text}) @category:{{{escape_tag(category)}}}"
        return (
            Query(text)
            .no_content()
            .sort_by(sort_field, asc=not sort_desc)
            .paging(offset, limit)
        )

    async def search(
        self,
        query_text: str,
        category: str = "",
        sort_field: str = "price",
        sort_desc: bool = True,
        offset: int = 0,
        limit: int = 10,
    ) -> SearchPage:
        query = self.build_query(query_text, category, sort_field, sort_desc, offset, limit)
        try:
            result = await self._ft().search(query)
        except RedisError as e:
            raise SearchFailedError(f"search failed: {e}") from e
        keys = [self.store_key(doc.id) for doc in result.docs]
        logger.debug("search q=%r category=%r offset=%s limit=%s total=%s", query_text, category, offset, limit, result.total)
        return SearchPage(keys=keys, total=int(result.total))
