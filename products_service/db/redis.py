# products_service/db/redis.py
import logging
import redis.asyncio as redis
from redis.exceptions import RedisError

from products_service.domain.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


async def connect(url: str) -> redis.Redis:
    """
    Open the Redis client backing the catalog and ping it.
    Unlike optional caches, the record store is mandatory: failure is fatal.
    """
    logger.info("Connecting to Redis at %s", url)
    client = redis.from_url(url, decode_responses=False)
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        await client.aclose()
        raise StoreUnavailableError(f"failed to connect to redis: {e}") from e
    logger.info("Redis connection successful")
    return client
