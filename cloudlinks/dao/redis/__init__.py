from cloudlinks.dao.redis.redis_key_schema import RedisKeySchema
from cloudlinks.dao.redis.read_cache import ReadCache, SHARED_READ_CACHE
from cloudlinks.dao.redis.mixins import RedisClientMixin
from cloudlinks.dao.redis.link_redis_dao import LinkRedisDAO
from cloudlinks.dao.redis.access_log_redis_dao import AccessLogRedisDAO


__all__ = [
    'RedisKeySchema',
    'ReadCache',
    'SHARED_READ_CACHE',
    'RedisClientMixin',
    'LinkRedisDAO',
    'AccessLogRedisDAO',
]
