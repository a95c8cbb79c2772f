import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for link records and access logs.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "cloudlinks:prod" or "cloudlinks:dev".

    Example:
        >>> keys = RedisKeySchema(prefix='cloudlinks:dev')
        >>> keys.link_key('abc')
        'cloudlinks:dev:link:abc'
        >>> RedisKeySchema().link_metadata_key('abc')
        'link:abc:metadata'
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, slug: str) -> str:
        return f'link:{slug}'

    @prefix_key
    def link_metadata_key(self, slug: str) -> str:
        return f'link:{slug}:metadata'

    @prefix_key
    def access_log_key(self) -> str:
        return 'access_logs'
