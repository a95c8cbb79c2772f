"""Unit tests for the process-wide link read cache."""

from freezegun import freeze_time

from cloudlinks.models import LinkRecord
from cloudlinks.dao.redis import ReadCache


LINK = LinkRecord(slug='abc', url='https://example.com')


def test_lookup_missing():
    assert ReadCache().lookup('link:abc') is None


def test_lookup_until_ttl_passes():
    cache = ReadCache()

    with freeze_time('2025-01-01 00:00:00') as frozen:
        cache.store('link:abc', LINK, ttl=30)
        frozen.tick(29)
        assert cache.lookup('link:abc') is LINK
        frozen.tick(1)
        assert cache.lookup('link:abc') is None


def test_invalidate_and_clear():
    cache = ReadCache()
    cache.store('link:abc', LINK, ttl=30)
    cache.store('link:xyz', LINK, ttl=30)

    cache.invalidate('link:abc')
    cache.invalidate('link:missing')
    assert cache.lookup('link:abc') is None
    assert cache.lookup('link:xyz') is LINK

    cache.clear()
    assert cache.lookup('link:xyz') is None


def test_store_evicts_oldest_when_full():
    cache = ReadCache(max_entries=2)
    cache.store('link:a', LINK, ttl=30)
    cache.store('link:b', LINK, ttl=30)
    cache.store('link:c', LINK, ttl=30)

    assert cache.lookup('link:a') is None
    assert cache.lookup('link:b') is LINK
    assert cache.lookup('link:c') is LINK


def test_store_evicts_expired_first():
    cache = ReadCache(max_entries=2)

    with freeze_time('2025-01-01 00:00:00') as frozen:
        cache.store('link:a', LINK, ttl=60)
        cache.store('link:b', LINK, ttl=5)
        frozen.tick(10)
        cache.store('link:c', LINK, ttl=60)

        assert cache.lookup('link:a') is LINK
        assert cache.lookup('link:b') is None
        assert cache.lookup('link:c') is LINK
