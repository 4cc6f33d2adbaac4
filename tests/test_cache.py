import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from nextchapter.cache import cache_get_n_set
from nextchapter.cache.cache_get_n_set import (
    CATALOG_VERSION_KEY, bump_catalog_version, cache_get_or_set_book_listings,
)
from nextchapter.cache.utils import make_params_key
from nextchapter.config.settings import config_settings


class InMemoryRedis:
    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value if isinstance(value, bytes) else str(value).encode()
        return True

    async def incr(self, key):
        value = int(self.store.get(key, b"0")) + 1
        self.store[key] = str(value).encode()
        return value

    async def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token.encode():
            del self.store[key]
            return 1
        return 0


class DownRedis:
    async def get(self, key):
        raise RedisConnectionError("redis is down")

    async def set(self, *args, **kwargs):
        raise RedisConnectionError("redis is down")

    async def incr(self, key):
        raise RedisConnectionError("redis is down")

    async def eval(self, *args):
        raise RedisConnectionError("redis is down")


@pytest.fixture
def cache_on(monkeypatch):
    monkeypatch.setattr(config_settings, "CACHE_ENABLED", True)


def _counting_loader(value):
    calls = []

    async def loader():
        calls.append(1)
        return value
    return loader, calls


def test_params_key_is_order_independent():
    assert make_params_key(limit=10, q="dune") == make_params_key(q="dune", limit=10)
    assert make_params_key(q=None, limit=5) == "limit=5"


@pytest.mark.asyncio
async def test_listing_is_served_from_cache_until_version_bump(cache_on, monkeypatch):
    fake = InMemoryRedis()
    monkeypatch.setattr(cache_get_n_set, "redis_client", fake)
    loader, calls = _counting_loader([{"id": 1, "title": "Dune"}])

    first = await cache_get_or_set_book_listings("books_best", "limit=20", 60, loader)
    second = await cache_get_or_set_book_listings("books_best", "limit=20", 60, loader)
    assert first == second == [{"id": 1, "title": "Dune"}]
    assert len(calls) == 1

    await bump_catalog_version()
    assert fake.store[CATALOG_VERSION_KEY] == b"1"

    await cache_get_or_set_book_listings("books_best", "limit=20", 60, loader)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_cache_outage_falls_back_to_loader(cache_on, monkeypatch):
    monkeypatch.setattr(cache_get_n_set, "redis_client", DownRedis())
    loader, calls = _counting_loader(["fresh"])

    assert await cache_get_or_set_book_listings("books_top", "limit=5", 60, loader) == ["fresh"]
    assert len(calls) == 1

    # version bump swallows the outage as well
    await bump_catalog_version()


@pytest.mark.asyncio
async def test_disabled_cache_never_touches_redis(monkeypatch):
    monkeypatch.setattr(config_settings, "CACHE_ENABLED", False)
    monkeypatch.setattr(cache_get_n_set, "redis_client", DownRedis())
    loader, calls = _counting_loader({"ok": True})

    assert await cache_get_or_set_book_listings("books_new", "limit=1", 60, loader) == {"ok": True}
    await cache_get_or_set_book_listings("books_new", "limit=1", 60, loader)
    assert len(calls) == 2
