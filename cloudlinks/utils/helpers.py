"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short link for a given slug
    request_path() -> str
        Extract the raw request path from API Gateway event
    request_query() -> list[tuple[str, str]]
        Extract the ordered query parameters from API Gateway event
    request_header() -> str | None
        Case-insensitive header lookup in API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from cloudlinks.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from typing import Any
from urllib.parse import parse_qsl
from collections.abc import Callable

from cloudlinks.exceptions import MissingEnvironmentVariableError
from cloudlinks.utils.runtime import running_locally
from cloudlinks.utils.constants import UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://lnk.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # Custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain and stage and stage != '$default':
        # Default AWS domains are routed per stage
        return f'https://{domain}/{stage}'
    elif domain:
        return f'https://{domain}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(slug: str, event: dict[str, Any]) -> str:
    """Get string representation of a short link

    Args:
        slug (str): link slug
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short link, e.g. 'https://lnk.example.com/abc'
    """
    return f'{base_url(event).rstrip("/")}/{slug}'


def request_path(event: dict[str, Any]) -> str:
    """Return the request path of an API Gateway event

    HTTP APIs (payload v2) carry the path in `rawPath`, REST APIs in `path`.
    On the default execute-api domain of a named HTTP API stage `rawPath`
    starts with `/<stage>`, which is dropped so the path matches what REST
    APIs report (custom domains never carry the stage).

    Example:
        >>> request_path({'rawPath': '/Prod/abc', 'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod'}})
        '/abc'
    """
    raw_path = event.get('rawPath')
    if not raw_path:
        return event.get('path') or '/'

    request_context = event.get('requestContext') or {}
    stage = request_context.get('stage', '')
    if 'execute-api' in request_context.get('domainName', '') and stage and stage != '$default':
        prefix = f'/{stage}'
        if raw_path == prefix:
            return '/'
        if raw_path.startswith(f'{prefix}/'):
            return raw_path[len(prefix) :]
    return raw_path


def request_query(event: dict[str, Any]) -> list[tuple[str, str]]:
    """Return the request's query parameters as ordered (name, value) pairs

    Repeated parameters are kept (e.g. `?tag=a&tag=b`).

    Example:
        >>> request_query({'rawQueryString': 'utm_source=x&tag=a&tag=b'})
        [('utm_source', 'x'), ('tag', 'a'), ('tag', 'b')]
    """
    if event.get('rawQueryString'):
        return parse_qsl(event['rawQueryString'], keep_blank_values=True)

    multi = event.get('multiValueQueryStringParameters') or {}
    if multi:
        return [(name, value) for name, values in multi.items() for value in values or []]

    single = event.get('queryStringParameters') or {}
    return [(name, value) for name, value in single.items() if value is not None]


def request_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive lookup of a single request header"""
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 when a Lambda handler raises unexpectedly

    When running locally the original exception is re-raised instead, so
    `sam local` shows the real traceback.

    Example:
        >>> @guarantee_500_response
        ... def lambda_handler(event, context):
        ...     raise RuntimeError('boom')
        >>> lambda_handler({}, None)['statusCode']
        500
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
