"""
Async Redis Client Factory.

Creates the Redis client backing RedisServerCache.
Uses redis.asyncio so cache calls never block the event loop.
"""

import logging
from urllib.parse import urlsplit

import redis.asyncio as redis
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Drop user and password from a connection URL before it is logged."""
    parts = urlsplit(url)
    if "@" not in parts.netloc:
        return url
    host = parts.netloc.rpartition("@")[2]
    return parts._replace(netloc=f"***@{host}").geturl()


async def create_redis_client(url: str) -> Redis:
    """
    Create async Redis client with connection pool.

    Args:
        url: Redis connection URL, e.g. redis://localhost:6379/0

    Returns:
        Redis: Connected async Redis client

    Raises:
        redis.ConnectionError: If Redis is not reachable
    """
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    await client.ping()
    logger.info(f"[Redis] Connected to {redact_url(url)}")

    return client


async def close_redis_client(client: Redis) -> None:
    """Close Redis client connection on application shutdown."""
    if client:
        await client.aclose()
        logger.info("[Redis] Connection closed")
