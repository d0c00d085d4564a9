"""Per-endpoint rate limiting for the unauthenticated auth routes.

slowapi keeps its counters in Redis when REDIS_URL is configured and in
process memory otherwise. Limits are switched off under APP_ENV=testing.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.siteline.core.config import get_settings
from src.siteline.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Key buckets on client IP only.

    Never mix request headers or body fields into the key: a caller could
    rotate them to mint fresh buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.redis_url)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


# Built at import time; limit strings are read from settings by the routes.
limiter = create_limiter()


def login_limit() -> str:
    return get_settings().login_rate_limit


def signup_limit() -> str:
    return get_settings().signup_rate_limit


def invite_limit() -> str:
    return get_settings().invite_rate_limit
