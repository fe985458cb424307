"""Redis connection pool."""

import redis.asyncio as redis
from fastapi import Request


def create_redis(url: str) -> redis.Redis:
    """Create the Redis client; connections are opened lazily."""
    return redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=50,
    )


async def close_redis(client: redis.Redis | None) -> None:
    """Close the Redis connection pool."""
    if client is not None:
        await client.aclose()


def get_redis(request: Request) -> redis.Redis | None:
    """Get the Redis client for this app, or None when caching is disabled (FastAPI dependency)."""
    return getattr(request.app.state, "redis", None)
