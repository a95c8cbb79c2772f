import json
import base64
import logging

from cloudlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from cloudlinks.core import ResetOperation
from cloudlinks.models.codec import link_to_dict
from cloudlinks.dao.redis import LinkRedisDAO
from cloudlinks.exceptions import ConfigurationError
from cloudlinks.utils import LinkSettings, app_prefix, epoch_now, get_short_url, guarantee_500_response, load_config
from cloudlinks.lambdas.reset_link.constants import (
    RESET_FORBIDDEN,
    RESET_SUCCESS,
    RESET_SKIPPED,
    INVALID_JSON_BODY,
    INVALID_CONFIGURATION,
)


logger = logging.getLogger(__name__)


def _json_response(status_code: int, body: dict) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_200(*, link: dict, short_link: str) -> LambdaResponse:
    return _json_response(200, {'link': link, 'shortLink': short_link})


def response_204() -> LambdaResponse:
    return {'statusCode': 204, 'body': ''}


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return _json_response(400, body)


def response_403(message: str) -> LambdaResponse:
    return _json_response(403, {'message': message, 'errorCode': RESET_FORBIDDEN})


def response_500() -> LambdaResponse:
    return _json_response(500, {'message': 'Internal Server Error'})


def request_body(event: LambdaEvent) -> dict:
    """Decode the request's JSON body (empty body -> {})

    Raises:
        ValueError: if the body is not a JSON object.
    """
    raw = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        raw = base64.b64decode(raw).decode('utf-8')
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError('JSON body must be an object')
    return body


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to reset a link's hit count

    This Lambda handler follows this procedure:
    - Step 1: Refuse resets in preview mode
    - Step 2: Extract the slug from the JSON body
    - Step 3: Zero the hit count, clear the first view time and store the link
    - Step 4: Respond with the reset link and its short link

    HTTP responses:
        200: Link reset
            link: reset link record
            shortLink: <scheme>://<host>/<slug>
        204: Nothing to reset (missing slug or unknown link)
        400: Bad client request (invalid JSON body)
        403: Forbidden (deployment runs in preview mode)
        500: Internal server error

    Example:
        >>> event = {'httpMethod': 'POST', 'body': '{"slug": "abc"}', 'requestContext': {'domainName': 'lnk.example.com'}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])['shortLink']
        'https://lnk.example.com/abc'
    """
    # 0- Get application's config
    try:
        app_config = load_config('reset_link')
        settings = LinkSettings.from_config(app_config.get('links'))
    except ConfigurationError:
        logger.exception('Invalid configuration for reset link function. Responding with 500.', extra={'event': INVALID_CONFIGURATION})
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Refuse resets in preview mode
    if settings.preview_mode:
        logger.info('Preview mode cannot reset links. Responding with 403.', extra={'event': RESET_FORBIDDEN})
        return response_403('Preview mode cannot reset links.')

    # 2- Extract slug from request body
    try:
        body = request_body(event)
    except (ValueError, UnicodeDecodeError):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    slug = body.get('slug')
    if not slug or not isinstance(slug, str):
        logger.info('Missing slug in request body. Responding with 204.', extra={'event': RESET_SKIPPED})
        return response_204()

    # 3- Reset the link
    link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
    link = ResetOperation(link_dao, settings).reset(slug, now=epoch_now())

    if link is None:
        logger.info('Link not found. Responding with 204.', extra={'slug': slug, 'event': RESET_SKIPPED})
        return response_204()

    # 4- Respond with the reset link
    logger.info('Reset link hit count. Responding with 200.', extra={'slug': slug, 'event': RESET_SUCCESS})
    return response_200(link=link_to_dict(link), short_link=get_short_url(link.slug, event))
