import redis.asyncio as redis
from config import settings

_redis_client: redis.Redis | None = None


async def init_redis_client() -> redis.Redis:
    """
    Creates the Redis connection pool used for the settings cache.
    Called once during the application's startup lifespan.
    """
    global _redis_client
    _redis_client = redis.from_url(
        str(settings.redis_url),
        password=settings.redis_password,
        decode_responses=True,
    )
    await _redis_client.ping()
    return _redis_client


async def close_redis_client() -> None:
    """Closes the Redis connection pool on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None
