"""Data Access Object (DAO) implementation for link records in Redis

Responsibilities:
    - Read link records, optionally through the process-wide read cache;
    - Write link records together with their side-channel metadata;
    - Mirror the record's store-level expiration onto both keys;
    - Raise DataStoreError on connectivity issues.

Storage layout (with prefix `cloudlinks:prod`):
    cloudlinks:prod:link:<slug>           -> JSON encoded LinkRecord (string)
    cloudlinks:prod:link:<slug>:metadata  -> {expiration, url, comment} (hash)

Example:
    >>> dao = LinkRedisDAO(redis_host='localhost', prefix='cloudlinks:dev')
    >>> dao.put('abc', LinkRecord(slug='abc', url='https://example.com'))
    <LinkRedisDAO>
    >>> dao.get('abc', cache_ttl=60).url
    'https://example.com'
    >>> dao.metadata('abc')
    {'url': 'https://example.com'}
"""

from beartype import beartype

from cloudlinks.models import LinkRecord
from cloudlinks.models.codec import decode_link, encode_link
from cloudlinks.types import LinkMetadata
from cloudlinks.dao.base import LinkBaseDAO
from cloudlinks.dao.redis.mixins import RedisClientMixin
from cloudlinks.dao.redis.helpers import handle_redis_connection_error
from cloudlinks.dao.redis.read_cache import ReadCache, SHARED_READ_CACHE


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for link records

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        read_cache (ReadCache):
            Cache consulted by reads with a `cache_ttl`.
    """

    def __init__(self, *args, read_cache: ReadCache | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.read_cache = SHARED_READ_CACHE if read_cache is None else read_cache

    @handle_redis_connection_error
    @beartype
    def get(self, key: str, cache_ttl: int | None = None, **kwargs) -> LinkRecord | None:
        """Retrieve a link record by key

        Args:
            key (str):
                Slug under which the record is stored.
            cache_ttl (int | None):
                When positive, serve the record from the read cache if it was
                read within the last `cache_ttl` seconds. None (or 0) always
                reads Redis and leaves the cache untouched.

        Returns:
            LinkRecord | None: the record, or None if the key doesn't exist.

        Raises:
            MalformedLinkError:
                If the stored value is not a valid link record.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(key)

        if cache_ttl:
            cached = self.read_cache.lookup(link_key)
            if cached is not None:
                return cached

        raw = self.redis.get(link_key)
        if raw is None:
            return None

        link = decode_link(raw)
        if cache_ttl:
            self.read_cache.store(link_key, link, ttl=cache_ttl)
        return link

    @handle_redis_connection_error
    @beartype
    def put(self, key: str, link: LinkRecord, expiration: int | None = None, **kwargs) -> 'LinkRedisDAO':
        """Store a link record and its metadata

        The record and its metadata hash are written in one Redis transaction
        and both expire at `expiration` (if given), so the metadata never
        outlives the record.

        Args:
            key (str):
                Slug under which the record is stored.
            link (LinkRecord):
                Record to store.
            expiration (int | None):
                Epoch seconds at which Redis drops both keys.

        Returns:
            LinkRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(key)
        metadata_key = self.keys.link_metadata_key(key)
        # fmt: off
        metadata = {
            name: value
            for name, value in (('expiration', expiration), ('url', link.url), ('comment', link.comment))
            if value is not None
        }
        # fmt: on

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(link_key, encode_link(link), exat=expiration)
            pipe.delete(metadata_key)
            if metadata:
                pipe.hset(metadata_key, mapping=metadata)
                if expiration is not None:
                    pipe.expireat(metadata_key, expiration)
            pipe.execute()

        self.read_cache.invalidate(link_key)
        return self

    @handle_redis_connection_error
    @beartype
    def metadata(self, key: str, **kwargs) -> LinkMetadata:
        """Return the metadata stored next to a link record (empty dict if none)"""
        metadata: LinkMetadata = dict(self.redis.hgetall(self.keys.link_metadata_key(key)))
        if 'expiration' in metadata:
            metadata['expiration'] = int(metadata['expiration'])
        return metadata
