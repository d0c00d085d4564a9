"""Optional Redis client with graceful fallback.

Redis backs the distributed rate limiter and is probed by /health. When
REDIS_URL is unset or the server is unreachable, callers get None and
carry on without it.
"""

from redis.asyncio import ConnectionPool, Redis

from src.siteline.core.config import get_settings
from src.siteline.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


async def get_redis() -> Redis | None:
    """Return the shared client, connecting lazily on first use.

    A failed connection is not retried until ``close_redis`` resets state.
    """
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        return _redis
    if _connection_attempted:
        return None

    _connection_attempted = True
    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set)")
        return None

    try:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        _redis = Redis(connection_pool=_pool)
        await _redis.ping()  # type: ignore[misc]
        logger.info("Redis connected")
        return _redis
    except Exception as e:
        logger.warning("Redis connection failed, continuing without it", error=str(e))
        await close_redis()
        _connection_attempted = True
        return None


async def close_redis() -> None:
    """Close the pool. Called from the application lifespan on shutdown."""
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        await _redis.aclose()
        logger.info("Redis connection closed")
    if _pool is not None:
        await _pool.disconnect()

    _redis = None
    _pool = None
    _connection_attempted = False


def reset_redis_state() -> None:
    """Forget the cached client without closing it. For tests."""
    global _pool, _redis, _connection_attempted
    _redis = None
    _pool = None
    _connection_attempted = False
