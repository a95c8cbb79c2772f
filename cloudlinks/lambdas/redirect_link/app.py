import json
import logging

from cloudlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from cloudlinks.models import AccessLogEntry, LinkKind, LinkRecord
from cloudlinks.core import HitAccountant, ResponseRenderer, Servability, SlugResolver, classify, expired_response, redirect_response
from cloudlinks.dao.redis import AccessLogRedisDAO, LinkRedisDAO
from cloudlinks.dao.exceptions import DataStoreError
from cloudlinks.exceptions import ConfigurationError
from cloudlinks.utils import (
    LinkSettings,
    app_prefix,
    epoch_now,
    guarantee_500_response,
    load_config,
    request_header,
    request_path,
    request_query,
)
from cloudlinks.utils.constants import HIT_PERSIST_DRAIN_TIMEOUT
from cloudlinks.lambdas.redirect_link.constants import (
    HOME_REDIRECT,
    LINK_NOT_FOUND,
    LINK_EXHAUSTED,
    LINK_VIEW_EXPIRED,
    REDIRECT_SUCCESS,
    TEXT_RENDERED,
    STORE_UNAVAILABLE,
    INVALID_CONFIGURATION,
)


logger = logging.getLogger(__name__)


def response_500(message: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    return {
        'statusCode': 500,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_404(error_code: str = LINK_NOT_FOUND) -> LambdaResponse:
    return {
        'statusCode': 404,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'message': 'Not Found', 'errorCode': error_code}),
    }


def access_log_entry(event: LambdaEvent, link: LinkRecord, now: int) -> AccessLogEntry:
    """Describe one view of `link` from the request's headers and context"""
    request_context = event.get('requestContext', {})
    source_ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    language = request_header(event, 'Accept-Language')

    return AccessLogEntry(
        slug=link.slug,
        timestamp=now,
        url=link.url,
        kind=str(link.kind),
        user_agent=request_header(event, 'User-Agent'),
        ip=source_ip,
        referer=request_header(event, 'Referer'),
        language=language.split(',', 1)[0].split(';', 1)[0].strip() if language else None,
        country=request_header(event, 'CloudFront-Viewer-Country'),
    )


def connect_link_dao(redis_config: dict) -> LinkRedisDAO | None:
    try:
        return LinkRedisDAO(**redis_config, prefix=app_prefix())
    except DataStoreError:
        logger.exception('Link store is unreachable.', extra={'event': STORE_UNAVAILABLE})
        return None


def connect_access_log_dao(link_dao: LinkRedisDAO, settings: LinkSettings) -> AccessLogRedisDAO | None:
    if not settings.access_log_enabled:
        return None
    try:
        return AccessLogRedisDAO(redis_client=link_dao.redis, prefix=app_prefix(), max_length=settings.access_log_max_length)
    except DataStoreError:
        logger.exception('Access log store is unreachable.', extra={'event': STORE_UNAVAILABLE})
        return None


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for short links

    This Lambda handler follows this procedure:
    - Step 1: Redirect `/` to the configured home URL (if any)
    - Step 2: Resolve the request path to a link record
    - Step 3: Refuse exhausted or self-destructed links
    - Step 4: Count the view and write the access log
    - Step 5: Redirect, or render the link's text page

    HTTP responses:
        301/302/303/307/308: Redirect to the link's URL (configurable status code)
            headers:
                Location: link URL, with the request query merged in if configured
        302: Redirect from `/` to the home URL
        200: Text link rendered as an HTML page
        404: Link not found (unknown, reserved or malformed slug; store unreachable)
        410: Link exhausted or self-destructed (HTML page)
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event (REST or HTTP API payload).
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> response = lambda_handler({'path': '/abc'}, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_link')
        settings = LinkSettings.from_config(app_config.get('links'))
    except ConfigurationError:
        logger.exception('Invalid configuration for redirect link function. Responding with 500.', extra={'event': INVALID_CONFIGURATION})
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Redirect to home URL
    path = request_path(event)
    if path == '/' and settings.home_url:
        logger.info('Redirecting client to home URL. Responding with 302.', extra={'event': HOME_REDIRECT})
        return redirect_response(settings.home_url, 302)

    # 2- Resolve link record
    link_dao = connect_link_dao(redis_config)
    resolved = SlugResolver(link_dao, settings).resolve(path)
    if resolved is None or (resolved.link.kind is LinkKind.REDIRECT and not resolved.link.url):
        logger.info('Link not found. Responding with 404.', extra={'path': path, 'event': LINK_NOT_FOUND})
        return response_404()

    link = resolved.link
    now = epoch_now()

    # 3- Refuse exhausted and self-destructed links (without counting the view)
    servability = classify(link, now)
    if servability is Servability.EXHAUSTED:
        logger.info(
            'Link reached its hit limit. Responding with 410.',
            extra={'slug': link.slug, 'hitCount': link.hit_count, 'maxHits': link.max_hits, 'event': LINK_EXHAUSTED},
        )
        return expired_response()

    if servability is Servability.VIEW_EXPIRED:
        logger.info(
            'Link self-destructed. Responding with 410.',
            extra={'slug': link.slug, 'expiredAt': link.view_expires_at, 'event': LINK_VIEW_EXPIRED},
        )
        return expired_response()

    # 4- Count the view (the store write runs in the background)
    accountant = HitAccountant(link_dao, access_log_dao=connect_access_log_dao(link_dao, settings))
    updated = accountant.record_hit(resolved, now, access_entry=access_log_entry(event, link, now))

    # 5- Respond with the link's content
    try:
        response = ResponseRenderer(settings).render(updated, query=request_query(event))
    finally:
        accountant.drain(timeout=HIT_PERSIST_DRAIN_TIMEOUT)

    if updated.kind is LinkKind.TEXT:
        logger.info('Rendering text link. Responding with 200.', extra={'slug': updated.slug, 'event': TEXT_RENDERED})
    else:
        logger.info(
            'Redirecting client to link URL. Responding with %s.',
            response['statusCode'],
            extra={'slug': updated.slug, 'event': REDIRECT_SUCCESS},
        )
    return response
