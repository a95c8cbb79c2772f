import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from cloudlinks.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def describe_connection(client: redis.Redis) -> str:
    """Return '<host>:<port>/<db>' of a Redis client's connection pool"""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Both refused connections and timed out commands surface as DataStoreError,
    so callers deal with a single store failure type.

    Example:
        >>> @handle_redis_connection_error
        ... def get(self, key):
        ...     return self.redis.get(key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise DataStoreError(f'Redis at {describe_connection(self.redis)} timed out.') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {describe_connection(self.redis)}.") from e

    return wrapper
