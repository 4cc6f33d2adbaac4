import asyncio
from typing import Any, Awaitable, Callable, Optional
import uuid
from redis.exceptions import RedisError
from nextchapter.cache._cache import REDIS_LOCK_TIMEOUT, redis_client
from nextchapter.cache.utils import build_key, deserialize, release_lock, serialize
from nextchapter.common.logging_setup import get_logger
from nextchapter.config.settings import config_settings

logger = get_logger("nextchapter.cache")

CATALOG_VERSION_KEY = "nc:catalog:version"


async def get_bytes(key: str) -> Optional[bytes]:
    return await redis_client.get(key)

async def set_bytes(key: str, data: bytes, ttl_seconds: int):
    await redis_client.set(key, data, ex=ttl_seconds)


async def catalog_version() -> str:
    raw = await redis_client.get(CATALOG_VERSION_KEY)
    return raw.decode() if raw else "0"


async def bump_catalog_version():
    """Invalidate every cached listing at once (ratings/stock changed)."""
    if not config_settings.CACHE_ENABLED:
        return
    try:
        await redis_client.incr(CATALOG_VERSION_KEY)
    except RedisError as e:
        logger.warning("cache.bump_version_failed", extra={"error": str(e)})


async def cache_get_or_set_book_listings(
    namespace: str,
    key_suffix: str,
    ttl: int,
    loader: Callable[[], Awaitable[Any]],
    lock_timeout: int = REDIS_LOCK_TIMEOUT,
) -> Any:
    """Read-through cache for catalog listings.

    One request per key computes the value under a short redis lock , concurrent
    misses poll for it until the lock times out and then compute themselves.
    Redis being down never fails the request , the loader result is returned as is.
    """
    if not config_settings.CACHE_ENABLED:
        return await loader()

    try:
        version = await catalog_version()
        key = build_key("nc", namespace, f"v{version}", key_suffix)
        raw = await get_bytes(key)
        if raw is not None:
            return deserialize(raw)

        lock_key = key + ":lock"
        token = uuid.uuid4().hex
        locked = await redis_client.set(lock_key, token, nx=True, ex=lock_timeout)
    except RedisError as e:
        logger.warning("cache.unavailable", extra={"namespace": namespace, "error": str(e)})
        return await loader()

    if locked:
        try:
            value = await loader()
            try:
                await set_bytes(key, serialize(value), ttl)
            except RedisError as e:
                logger.warning("cache.set_failed", extra={"key": key, "error": str(e)})
            return value
        finally:
            await release_lock(redis_client, lock_key, token)

    # someone else is computing , poll until the value appears or the lock would have expired
    waited = 0.0
    interval = 0.05
    while waited < lock_timeout:
        await asyncio.sleep(interval)
        waited += interval
        try:
            raw_after = await get_bytes(key)
        except RedisError:
            break
        if raw_after is not None:
            return deserialize(raw_after)

    return await loader()
