"""Unit tests for the redirect_link AWS Lambda handler.

Verify the handler resolves slugs, refuses expired links, counts views and
responds with the right redirect, text page or error.

Test coverage includes:

1. Redirect links
   - Redirects with the configured status code and counts the view.
   - Forwards the request query string when configured.
   - Writes an access log entry describing the request.
2. Text links
   - Renders Markdown content as an HTML page and counts the view.
3. Expired links
   - Exhausted links respond with 410 without counting the view.
   - Self-destructed links respond with 410 without counting the view.
   - A link with a hit limit stops being served once the limit is reached.
4. Resolution
   - Root path redirects to the home URL when configured.
   - Unknown, reserved and malformed slugs respond with 404.
   - Case-insensitive lookup falls back to the slug as typed.
5. Errors
   - Configuration errors and unreachable stores.

Fixtures:
    - `store`: in-memory link DAO shared by every request in a test.
    - `access_log`: mock access log DAO.
    - `config`: AppConfig section for the handler.
    - `_patch_lambda_dependencies`: autouse fixture patching app dependencies.
"""

import json
from unittest.mock import MagicMock

import pytest

from cloudlinks.lambdas.redirect_link import app
from cloudlinks.models import LinkRecord
from cloudlinks.dao.base import AccessLogBaseDAO, LinkBaseDAO
from cloudlinks.dao.exceptions import DataStoreError
from cloudlinks.exceptions import BadConfigurationError


NOW = 1_760_000_000


class InMemoryLinkDAO(LinkBaseDAO):
    def __init__(self):
        self.records = {}
        self.writes = []
        self.redis = MagicMock()

    def get(self, key, cache_ttl=None, **kwargs):
        return self.records.get(key)

    def put(self, key, link, expiration=None, **kwargs):
        self.records[key] = link
        self.writes.append((key, link, expiration))
        return self

    def metadata(self, key, **kwargs):
        return {}


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def store():
    return InMemoryLinkDAO()


@pytest.fixture()
def access_log():
    return MagicMock(spec=AccessLogBaseDAO)


@pytest.fixture()
def links_config():
    return {}


@pytest.fixture()
def config(links_config):
    return {
        'redis': {'host': 'redis.test', 'port': 6379, 'db': 0},
        'links': links_config,
    }


@pytest.fixture()
def context():
    class _Context:
        function_name = 'redirect_link'

    return _Context()


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, store, access_log, config):
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.setattr(app, 'load_config', lambda lambda_name: config)
    monkeypatch.setattr(app, 'app_prefix', lambda: 'testapp:test')
    monkeypatch.setattr(app, 'epoch_now', lambda: NOW)
    monkeypatch.setattr(app, 'LinkRedisDAO', MagicMock(return_value=store))
    monkeypatch.setattr(app, 'AccessLogRedisDAO', MagicMock(return_value=access_log))


def apigw_event(path: str, query: str = '', **headers) -> dict:
    return {
        'version': '2.0',
        'rawPath': path,
        'rawQueryString': query,
        'headers': headers,
        'requestContext': {
            'domainName': 'lnk.example.com',
            'stage': '$default',
            'http': {'method': 'GET', 'path': path, 'sourceIp': '198.51.100.7'},
        },
    }


# -------------------------------
# 1. Redirect links
# -------------------------------


def test_redirect(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com', hit_count=0)

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 301
    assert response['headers']['Location'] == 'https://example.com'
    assert store.records['x'].hit_count == 1
    assert store.records['x'].first_hit_at == NOW


def test_redirect_keeps_store_expiration(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com', expiration=NOW + 3600)

    app.lambda_handler(apigw_event('/x'), context)

    assert store.writes == [('x', store.records['x'], NOW + 3600)]


@pytest.mark.parametrize('links_config', [{'redirect_with_query': True, 'redirect_status_code': 302}])
def test_redirect_with_query(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')

    response = app.lambda_handler(apigw_event('/x', query='q=1'), context)

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'https://example.com?q=1'


def test_redirect_without_query_forwarding(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')

    response = app.lambda_handler(apigw_event('/x', query='q=1'), context)

    assert response['headers']['Location'] == 'https://example.com'


def test_redirect_writes_access_log(store, access_log, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')
    event = apigw_event(
        '/x',
        **{'User-Agent': 'curl/8.0', 'Referer': 'https://ref.example.com', 'Accept-Language': 'de-DE,de;q=0.9', 'CloudFront-Viewer-Country': 'DE'},
    )

    app.lambda_handler(event, context)

    entry = access_log.write.call_args.args[0]
    assert entry.slug == 'x'
    assert entry.timestamp == NOW
    assert entry.url == 'https://example.com'
    assert entry.kind == 'redirect'
    assert entry.user_agent == 'curl/8.0'
    assert entry.ip == '198.51.100.7'
    assert entry.referer == 'https://ref.example.com'
    assert entry.language == 'de-DE'
    assert entry.country == 'DE'


@pytest.mark.parametrize('links_config', [{'access_log_enabled': False}])
def test_redirect_without_access_log(store, access_log, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 301
    access_log.write.assert_not_called()


def test_redirect_survives_access_log_failure(store, access_log, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')
    access_log.write.side_effect = DataStoreError('Redis at redis.test:6379/0 timed out.')

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 301


# -------------------------------
# 2. Text links
# -------------------------------


def test_text_link(store, context):
    store.records['note'] = LinkRecord(slug='note', content='# Hi', link_type='text', title='Note')

    response = app.lambda_handler(apigw_event('/note'), context)

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'] == 'text/html; charset=utf-8'
    assert '<h1>Hi</h1>' in response['body']
    assert store.records['note'].hit_count == 1


def test_text_link_with_self_destruct_timer(store, context):
    store.records['burn'] = LinkRecord(slug='burn', content='secret', view_expire_seconds=10)

    response = app.lambda_handler(apigw_event('/burn'), context)

    assert response['statusCode'] == 200
    assert f'data-expires-at="{NOW + 10}"' in response['body']


# -------------------------------
# 3. Expired links
# -------------------------------


def test_exhausted_link(store, access_log, context):
    store.records['note'] = LinkRecord(slug='note', content='# Hi', link_type='text', max_hits=1, hit_count=1)

    response = app.lambda_handler(apigw_event('/note'), context)

    assert response['statusCode'] == 410
    assert 'Link Expired' in response['body']
    assert store.records['note'].hit_count == 1
    assert store.writes == []
    access_log.write.assert_not_called()


def test_self_destructed_link(store, access_log, context):
    store.records['burn'] = LinkRecord(slug='burn', content='secret', view_expire_seconds=10, first_hit_at=NOW - 20, hit_count=1)

    response = app.lambda_handler(apigw_event('/burn'), context)

    assert response['statusCode'] == 410
    assert 'This link has expired and is no longer available.' in response['body']
    assert store.writes == []
    access_log.write.assert_not_called()


def test_link_with_hit_limit(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com', max_hits=2)

    statuses = [app.lambda_handler(apigw_event('/x'), context)['statusCode'] for _ in range(3)]

    assert statuses == [301, 301, 410]
    assert store.records['x'].hit_count == 2


# -------------------------------
# 4. Resolution
# -------------------------------


@pytest.mark.parametrize('links_config', [{'home_url': 'https://home.example.com'}])
def test_home_redirect(store, context):
    response = app.lambda_handler(apigw_event('/'), context)

    assert response == {'statusCode': 302, 'headers': {'Location': 'https://home.example.com'}, 'body': ''}


@pytest.mark.parametrize('path', ['/', '/missing', '/dashboard', '/not_a_slug'])
def test_not_found(store, context, path):
    store.records['dashboard'] = LinkRecord(slug='dashboard', url='https://example.com')

    response = app.lambda_handler(apigw_event(path), context)

    assert response['statusCode'] == 404
    assert json.loads(response['body']) == {'message': 'Not Found', 'errorCode': 'LINK_NOT_FOUND'}
    assert store.writes == []


def test_redirect_link_without_url(store, context):
    store.records['x'] = LinkRecord(slug='x')

    assert app.lambda_handler(apigw_event('/x'), context)['statusCode'] == 404


def test_case_insensitive_lookup(store, context):
    store.records['mylink'] = LinkRecord(slug='mylink', url='https://example.com')

    response = app.lambda_handler(apigw_event('/MyLink'), context)

    assert response['statusCode'] == 301
    assert store.writes[0][0] == 'mylink'


def test_case_insensitive_fallback_writes_original_key(store, context):
    store.records['MyLink'] = LinkRecord(slug='MyLink', url='https://example.com')

    response = app.lambda_handler(apigw_event('/MyLink'), context)

    assert response['statusCode'] == 301
    assert [key for key, _, _ in store.writes] == ['MyLink']
    assert 'mylink' not in store.records


@pytest.mark.parametrize('links_config', [{'case_sensitive': True}])
def test_case_sensitive_lookup(store, context):
    store.records['mylink'] = LinkRecord(slug='mylink', url='https://example.com')

    assert app.lambda_handler(apigw_event('/MyLink'), context)['statusCode'] == 404


def test_rest_api_event(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')
    event = {
        'httpMethod': 'GET',
        'path': '/x/',
        'queryStringParameters': None,
        'headers': None,
        'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod', 'identity': {'sourceIp': '203.0.113.9'}},
    }

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 301
    assert response['headers']['Location'] == 'https://example.com'


def test_http_api_named_stage(store, context):
    """Short links on the default execute-api domain carry the stage before the slug."""
    store.records['abc'] = LinkRecord(slug='abc', url='https://example.com')
    event = apigw_event('/Prod/abc')
    event['requestContext'].update(domainName='x1.execute-api.us-east-1.amazonaws.com', stage='Prod')

    response = app.lambda_handler(event, context)

    assert response['statusCode'] == 301
    assert response['headers']['Location'] == 'https://example.com'
    assert [key for key, _, _ in store.writes] == ['abc']


# -------------------------------
# 5. Errors
# -------------------------------


def test_invalid_configuration(monkeypatch, context):
    def _raise(lambda_name):
        raise BadConfigurationError("AppConfig document has no 'redirect_link' configuration for the active backend.")

    monkeypatch.setattr(app, 'load_config', _raise)

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 500
    assert json.loads(response['body']) == {'message': 'Internal Server Error'}


@pytest.mark.parametrize('links_config', [{'redirect_status_code': 200}])
def test_invalid_links_configuration(context):
    assert app.lambda_handler(apigw_event('/x'), context)['statusCode'] == 500


def test_unreachable_store(monkeypatch, context):
    monkeypatch.setattr(app, 'LinkRedisDAO', MagicMock(side_effect=DataStoreError("Can't connect to Redis at redis.test:6379/0.")))

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 404


def test_store_read_failure(monkeypatch, store, context):
    store.get = MagicMock(side_effect=DataStoreError('Redis at redis.test:6379/0 timed out.'))

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['error_code'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'


def test_failed_hit_persist_still_responds(store, context):
    store.records['x'] = LinkRecord(slug='x', url='https://example.com')
    store.put = MagicMock(side_effect=DataStoreError('Redis at redis.test:6379/0 timed out.'))

    response = app.lambda_handler(apigw_event('/x'), context)

    assert response['statusCode'] == 301
    store.put.assert_called_once()
