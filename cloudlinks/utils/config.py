"""Utility functions for application configuration management.

Lambda functions read their configuration from **AWS AppConfig**. Each
environment (`APP_ENV`) has a dedicated AppConfig *Environment* within the
shared AppConfig *Application* identified by `APP_NAME`. Configuration data
is a JSON document stored under a configuration profile (typically
`backend-config`):

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "redirect_link": {
                "redis": { "host": "...", "port": 6379, "db": 0 },
                "links": { "case_sensitive": false, "redirect_status_code": 302 }
            },
            "reset_link": {
                "redis": { ... },
                "links": { "preview_mode": false }
            }
        }
    }

Each Lambda loads its own section (e.g. `"redirect_link"`). The `links`
section is parsed by `cloudlinks.utils.settings.LinkSettings`.

Functions:
    app_env() -> str
        Current application environment (`APP_ENV`), `'local'` by default.
    app_name() -> str | None
        Application name (`APP_NAME`), or None if not set.
    app_prefix() -> str | None
        Key prefix for DAOs, or None if `APP_NAME` is not set.
    project_root() -> Path
        Absolute path to the project root directory.
    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig. Under SAM,
        load it from a local AppConfig agent instead.

Example:
    >>> from cloudlinks.utils.config import load_config
    >>> config = load_config('redirect_link')
    >>> config['redis']['host']
    'redis.host.docker.internal'
    >>> config['links']['redirect_status_code']
    302
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from pathlib import Path
from collections.abc import Callable

import boto3

from cloudlinks.types import LambdaConfiguration
from cloudlinks.exceptions import BadConfigurationError
from cloudlinks.utils.helpers import require_environment
from cloudlinks.utils.runtime import running_locally
from cloudlinks.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    PROJECT_ROOT_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
)


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(APP_NAME_ENV)


def project_root() -> Path:
    return Path(os.environ.get(PROJECT_ROOT_ENV, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'cloudlinks'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'cloudlinks:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def lambda_section(document: dict, lambda_name: str) -> LambdaConfiguration:
    """Extract a Lambda's configuration from a full AppConfig document

    Only the active backend's connection settings are kept, next to the
    (optional) `links` settings section.

    Raises:
        BadConfigurationError:
            If the document has no section for the active backend or Lambda.
    """
    try:
        backend = document['active_backend']
        section = document['configs'][lambda_name]
        data = {backend: section[backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no '{lambda_name}' configuration for the active backend.") from e

    data['links'] = section.get('links') or {}
    return data


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    # ruff: noqa: E701
    def __validate_appconfig_url(url: str) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(APPCONFIG_AGENT_URL_ENV))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(APPCONFIG_PROFILE_NAME_ENV, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = lambda_section(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "redirect_link" or "reset_link").

    Returns:
        dict: `{<backend>: {...}, 'links': {...}}` for the requested Lambda.

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is not set.
        BadConfigurationError:
            If the deployed document has no section for the Lambda.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = lambda_section(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data
