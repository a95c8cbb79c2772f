"""Redis mixin providing shared client initialization and connectivity checks.

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup & healthcheck.

Example:
    >>> class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    ...     pass
    ...
    >>> dao = LinkRedisDAO(redis_host='localhost', prefix='cloudlinks:prod')
    >>> dao._healthcheck()
    True
"""

from typing import Optional

import redis

from cloudlinks.dao.redis.redis_key_schema import RedisKeySchema
from cloudlinks.dao.redis.helpers import describe_connection
from cloudlinks.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Mixin Redis client setup and health check for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis):
            Active Redis client instance used by subclasses.

        keys (RedisKeySchema):
            Helper class for generating namespaced Redis key names.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_ssl: Optional[bool] = False,
        redis_socket_timeout: Optional[float] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize a Redis-backed DAO

        Either reuse an existing Redis client instance or create one from the
        `redis` section of the Lambda's AppConfig (keys prefixed with `redis_`).

        Args:
            redis_host, redis_port, redis_db:
                Location of the Redis server. Defaults to localhost:6379/0.

            redis_decode_responses (Optional[bool]):
                If True, decodes Redis responses. Defaults to True.

            redis_username, redis_password (Optional[str]):
                Credentials for Redis authentication (if required).

            redis_ssl (Optional[bool]):
                Connect over TLS (e.g. ElastiCache with in-transit encryption).

            redis_socket_timeout (Optional[float]):
                Seconds a command may take before it times out.

            redis_client (Optional[redis.Redis]):
                Pre-initialized Redis client. If None, a new client is created.

            prefix (Optional[str]):
                Namespace prefix for all Redis keys, e.g. 'app:env'.

        Raises:
            DataStoreError:
                If Redis healthcheck fails (connectivity issues).
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                ssl=bool(redis_ssl),
                socket_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis connection cannot be established and raise_error=True.
        """
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if raise_error:
                raise DataStoreError(
                    f"Can't connect to Redis at {describe_connection(self.redis)}. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True
