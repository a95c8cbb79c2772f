from dataclasses import asdict

from beartype import beartype

from cloudlinks.models import AccessLogEntry
from cloudlinks.dao.base import AccessLogBaseDAO
from cloudlinks.dao.redis.mixins import RedisClientMixin
from cloudlinks.dao.redis.helpers import handle_redis_connection_error
from cloudlinks.utils.constants import DEFAULT_ACCESS_LOG_MAX_LENGTH


class AccessLogRedisDAO(RedisClientMixin, AccessLogBaseDAO):
    """Append link views to a capped Redis stream

    Each view becomes one stream entry (XADD) under `<prefix>:access_logs`.
    The stream is trimmed approximately to `max_length` entries on write.

    Example:
        >>> dao = AccessLogRedisDAO(redis_client=client, prefix='cloudlinks:dev', max_length=1000)
        >>> dao.write(AccessLogEntry(slug='abc', timestamp=1760000000, url='https://example.com'))
        <AccessLogRedisDAO>
    """

    def __init__(self, *args, max_length: int = DEFAULT_ACCESS_LOG_MAX_LENGTH, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_length = max_length

    @handle_redis_connection_error
    @beartype
    def write(self, entry: AccessLogEntry, **kwargs) -> 'AccessLogRedisDAO':
        fields = {name: str(value) for name, value in asdict(entry).items() if value is not None}
        self.redis.xadd(self.keys.access_log_key(), fields, maxlen=self.max_length, approximate=True)
        return self
