"""
Redis utility module for centralized Redis configuration and connection logic.

Redis is optional: it only backs the distributed per-user write lock used when
several bot processes share one database.
"""

import logging
from typing import Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisUtils:
    """Centralized Redis configuration and connection utilities."""

    @staticmethod
    def get_secure_redis_url() -> Optional[str]:
        """Get Redis URL with security validation for production deployments."""
        from greenbot.config import Config
        redis_url = Config.REDIS_URL
        if not redis_url:
            return None

        if RedisUtils._validate_redis_security(redis_url):
            return redis_url
        logger.error("REDIS_URL contains insecure configuration")
        return None

    @staticmethod
    def _validate_redis_security(redis_url: str) -> bool:
        """Validate that Redis URL meets security requirements."""
        from greenbot.config import Config
        if not getattr(Config, 'DEBUG', True):
            # Production mode - enforce strict security
            if not redis_url.startswith('rediss://'):
                logger.error("Production Redis must use rediss:// (TLS) protocol")
                return False
            if '@' not in redis_url:
                logger.error("Production Redis must include authentication credentials")
                return False
        elif not redis_url.startswith(('redis://localhost', 'redis://127.0.0.1', 'rediss://')):
            logger.warning(f"Potentially insecure Redis URL in development: {redis_url}")

        return True

    @staticmethod
    async def create_redis_client() -> Optional[redis.Redis]:
        """Create a Redis client with secure configuration."""
        redis_url = RedisUtils.get_secure_redis_url()
        if not redis_url:
            return None

        try:
            client = redis.from_url(redis_url)
            # Test connection
            await client.ping()
            logger.info("Successfully connected to Redis")
            return client
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            return None
