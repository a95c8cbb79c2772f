from unittest.mock import MagicMock

import pytest
import redis

from cloudlinks.dao.redis import SHARED_READ_CACHE


@pytest.fixture
def app_prefix() -> str:
    """Provide a consistent Redis key prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client."""
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    client.get.return_value = None
    client.hgetall.return_value = {}
    return client


@pytest.fixture(autouse=True)
def _clear_read_cache():
    """Keep cached link reads from leaking between tests."""
    SHARED_READ_CACHE.clear()
    yield
    SHARED_READ_CACHE.clear()
