"""Unit tests for response rendering.

Test coverage includes:
    1. Redirect responses
       - Configured status code, optional query forwarding.
    2. Text responses
       - Markdown rendered to sanitized HTML, title/description, countdown.
    3. Expired responses
"""

import pytest

from cloudlinks.core import ResponseRenderer, expired_response, merge_query, redirect_response, render_markdown
from cloudlinks.models import LinkRecord
from cloudlinks.utils import LinkSettings


# -------------------------------
# 1. Redirect responses
# -------------------------------


def test_redirect_response():
    assert redirect_response('https://example.com', 308) == {
        'statusCode': 308,
        'headers': {'Location': 'https://example.com'},
        'body': '',
    }


@pytest.mark.parametrize('status_code', [301, 302, 307])
def test_render_redirect_status_code(status_code):
    renderer = ResponseRenderer(LinkSettings(redirect_status_code=status_code))

    response = renderer.render(LinkRecord(slug='abc', url='https://example.com'))

    assert response['statusCode'] == status_code
    assert response['headers']['Location'] == 'https://example.com'


def test_render_redirect_ignores_query_by_default():
    renderer = ResponseRenderer(LinkSettings())

    response = renderer.render(LinkRecord(slug='abc', url='https://example.com/page'), query=[('utm_source', 'x')])

    assert response['headers']['Location'] == 'https://example.com/page'


def test_render_redirect_with_query():
    renderer = ResponseRenderer(LinkSettings(redirect_with_query=True))

    response = renderer.render(LinkRecord(slug='abc', url='https://example.com/page?ref=a'), query=[('utm_source', 'x')])

    assert response['headers']['Location'] == 'https://example.com/page?ref=a&utm_source=x'


# fmt: off
@pytest.mark.parametrize('url,query,expected', [
    ('https://example.com', [], 'https://example.com'),
    ('https://example.com/p', [('a', '1')], 'https://example.com/p?a=1'),
    ('https://example.com/p?a=1&b=2', [('a', '9')], 'https://example.com/p?b=2&a=9'),
    ('https://example.com/p?a=1#top', [('c', 'x y')], 'https://example.com/p?a=1&c=x+y#top'),
    ('https://example.com/p?download&name=a%20b', [('q', '1')], 'https://example.com/p?download&name=a%20b&q=1'),
    ('https://example.com/p?download&x=1', [('download', '1')], 'https://example.com/p?x=1&download=1'),
    ('https://example.com/p?a%5B%5D=1&b=2', [('a[]', '9')], 'https://example.com/p?b=2&a%5B%5D=9'),
])
# fmt: on
def test_merge_query(url, query, expected):
    assert merge_query(url, query) == expected


# -------------------------------
# 2. Text responses
# -------------------------------


def test_render_markdown():
    html = render_markdown('# Hello\n\nSome **bold** text.')

    assert '<h1>Hello</h1>' in html
    assert '<strong>bold</strong>' in html


def test_render_markdown_strips_scripts():
    html = render_markdown('Hi <script>alert(1)</script>')

    assert '<script>' not in html
    assert 'Hi' in html


def test_render_text_link():
    link = LinkRecord(slug='note', content='# Hello', title='My <note>', description='A short note')

    response = ResponseRenderer(LinkSettings()).render(link)

    assert response['statusCode'] == 200
    assert response['headers'] == {'Content-Type': 'text/html; charset=utf-8'}
    assert '<title>My &lt;note&gt;</title>' in response['body']
    assert '<meta name="description" content="A short note">' in response['body']
    assert '<article><h1>Hello</h1></article>' in response['body']
    assert 'data-expires-at' not in response['body']


def test_render_text_link_title_defaults_to_slug():
    response = ResponseRenderer(LinkSettings()).render(LinkRecord(slug='note', content='hi'))

    assert '<title>note</title>' in response['body']
    assert 'name="description"' not in response['body']


def test_render_text_link_with_countdown():
    link = LinkRecord(slug='note', content='hi', first_hit_at=1_760_000_000, view_expire_seconds=60)

    response = ResponseRenderer(LinkSettings()).render(link)

    assert 'data-expires-at="1760000060"' in response['body']


def test_render_text_link_ignores_redirect_settings():
    renderer = ResponseRenderer(LinkSettings(redirect_with_query=True, redirect_status_code=302))

    response = renderer.render(LinkRecord(slug='note', content='hi', url='https://example.com', link_type='text'), query=[('a', '1')])

    assert response['statusCode'] == 200
    assert 'Location' not in response['headers']


# -------------------------------
# 3. Expired responses
# -------------------------------


def test_expired_response():
    response = expired_response()

    assert response['statusCode'] == 410
    assert response['headers'] == {'Content-Type': 'text/html; charset=utf-8'}
    assert 'Link Expired' in response['body']
    assert 'This link has expired and is no longer available.' in response['body']
