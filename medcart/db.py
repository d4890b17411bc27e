"""
Database Module - Upstash Redis Client

Provides the async Upstash Redis client used as durable key-value storage
for the cart, plus key naming helpers.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from medcart import config


# Singleton instance, owned by the composition root via get_redis()/reset_redis()
_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


async def reset_redis() -> None:
    """Close and forget the shared client (used on shutdown)."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None


class RedisKeys:
    """Redis key prefixes for different data types."""

    # Cart storage
    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"
