# products_service/domain/repositories/kv_store.py
from __future__ import annotations
from typing import AsyncIterator, List, Optional, Sequence
from redis.asyncio import Redis
from redis.exceptions import RedisError

from products_service.domain.exceptions import ProductNotFoundError, StoreUnavailableError

"""
Note:
    - Thin adapter over the Redis keyspace holding one JSON record per key.
    - No business logic here: get/set/scan only. Key layout is owned by the caller.
    - Never use KEYS: enumeration goes through SCAN so it stays bounded on large catalogs.
    - The client runs with decode_responses=False: values stay raw bytes so a corrupt
      record reaches the decoder instead of failing inside the client. Keys are decoded here.
"""


def _key(raw: str | bytes) -> str:
    return raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw


class PrefixScan:
    """
    Restartable, finite sequence of key batches matching `prefix*`.
    Each `async for` starts a new SCAN at cursor 0 and stops when Redis answers cursor 0.
    A key can be reported more than once during one pass; consumers deduplicate.
    """

    def __init__(self, redis: Redis, prefix: str, batch_size: int):
        self.redis = redis
        self.pattern = f"{prefix}*"
        self.batch_size = batch_size

    def __aiter__(self) -> AsyncIterator[List[str]]:
        return self._batches()

    async def _batches(self) -> AsyncIterator[List[str]]:
        cursor = 0
        while True:
            try:
                cursor, keys = await self.redis.scan(cursor=cursor, match=self.pattern, count=self.batch_size)
            except RedisError as e:
                raise StoreUnavailableError(f"failed to scan keys {self.pattern}: {e}") from e
            if keys:
                yield [_key(k) for k in keys]
            if int(cursor) == 0:
                return


class KeyValueStore:
    """
    Record store adapter. Missing keys on `get` raise ProductNotFoundError;
    every network/protocol error surfaces as StoreUnavailableError.
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    async def put(self, key: str, value: str | bytes) -> None:
        try:
            await self.redis.set(key, value)
        except RedisError as e:
            raise StoreUnavailableError(f"failed to set {key}: {e}") from e

    async def get(self, key: str) -> bytes:
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            raise StoreUnavailableError(f"failed to get {key}: {e}") from e
        if raw is None:
            raise ProductNotFoundError(key)
        return raw

    async def get_many(self, keys: Sequence[str]) -> List[Optional[bytes]]:
        """MGET; absent keys come back as None, positions preserved."""
        if not keys:
            return []
        try:
            return await self.redis.mget(list(keys))
        except RedisError as e:
            raise StoreUnavailableError(f"failed to fetch {len(keys)} keys: {e}") from e

    def scan_by_prefix(self, prefix: str, batch_size: int = 1000) -> PrefixScan:
        return PrefixScan(self.redis, prefix, batch_size)

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            raise StoreUnavailableError(f"ping failed: {e}") from e

    async def close(self) -> None:
        await self.redis.aclose()
