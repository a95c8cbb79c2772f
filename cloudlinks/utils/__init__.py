from cloudlinks.utils.config import app_env, app_name, project_root, app_prefix, load_config
from cloudlinks.utils.helpers import (
    base_url,
    get_short_url,
    request_path,
    request_query,
    request_header,
    require_environment,
    guarantee_500_response,
)
from cloudlinks.utils.runtime import running_locally, epoch_now
from cloudlinks.utils.settings import LinkSettings
from cloudlinks.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'request_path',
    'request_query',
    'request_header',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'epoch_now',
    'LinkSettings',
    'initialize_logging',
]
