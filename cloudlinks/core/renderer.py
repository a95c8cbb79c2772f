"""Build API Gateway responses for resolved links

Responses:
    redirect  -> 301/302/303/307/308 with `Location` (configurable status code)
    text      -> 200 HTML page rendered from the link's Markdown content
    expired   -> 410 HTML page, shared by exhausted and self-destructed links

Text pages of links with a running self-destruct timer get a countdown. The
page only receives the expiry instant (`data-expires-at`); counting down and
reloading happen in the browser.
"""

from urllib.parse import unquote_plus, urlencode, urlsplit, urlunsplit

import markdown
import nh3
from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from cloudlinks.models import LinkKind, LinkRecord
from cloudlinks.types import LambdaResponse
from cloudlinks.utils.settings import LinkSettings


HTML_CONTENT_TYPE = 'text/html; charset=utf-8'

templates = Environment(
    loader=PackageLoader('cloudlinks.core', 'templates'),
    autoescape=select_autoescape(['html']),
)


def render_markdown(content: str) -> str:
    """Convert Markdown to sanitized HTML"""
    html = markdown.markdown(content, extensions=['extra', 'sane_lists'])
    return nh3.clean(html)


def merge_query(url: str, query: list[tuple[str, str]]) -> str:
    """Merge request query parameters into a destination URL

    The destination's own parameters are kept as written (bare flags and
    percent-escapes included), except those the request sets again, which
    take the request's values.

    Example:
        >>> merge_query('https://example.com/page?ref=a&x=1', [('x', '2'), ('q', '1')])
        'https://example.com/page?ref=a&x=2&q=1'
    """
    if not query:
        return url

    parts = urlsplit(url)
    overridden = {name for name, _ in query}
    kept = [segment for segment in parts.query.split('&') if segment and unquote_plus(segment.split('=', 1)[0]) not in overridden]
    return urlunsplit(parts._replace(query='&'.join(kept + [urlencode(query)])))


def redirect_response(location: str, status_code: int) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Location': location},
        'body': '',
    }


def html_response(body: str, status_code: int = 200) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': HTML_CONTENT_TYPE},
        'body': body,
    }


def expired_response() -> LambdaResponse:
    return html_response(templates.get_template('expired.html').render(), status_code=410)


def text_response(link: LinkRecord) -> LambdaResponse:
    page = templates.get_template('text.html').render(
        title=link.title or link.slug,
        description=link.description,
        body=Markup(render_markdown(link.content or '')),
        expires_at=link.view_expires_at,
    )
    return html_response(page)


class ResponseRenderer:
    """Turn a servable link into its response

    Example:
        >>> renderer = ResponseRenderer(LinkSettings(redirect_status_code=302))
        >>> renderer.render(LinkRecord(slug='x', url='https://example.com'))['headers']['Location']
        'https://example.com'
    """

    def __init__(self, settings: LinkSettings):
        self.settings = settings

    def render(self, link: LinkRecord, query: list[tuple[str, str]] | None = None) -> LambdaResponse:
        if link.kind is LinkKind.TEXT:
            return text_response(link)

        location = link.url
        if self.settings.redirect_with_query:
            location = merge_query(location, query or [])
        return redirect_response(location, self.settings.redirect_status_code)
