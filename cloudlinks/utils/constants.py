# Default store read-cache TTL (seconds)
DEFAULT_LINK_CACHE_TTL = 60

# Default TTL applied to links while running in preview mode (1 day in seconds)
DEFAULT_PREVIEW_TTL = 86_400  # 60 * 60 * 24

# Default slug validation pattern (matched case-insensitively)
DEFAULT_SLUG_REGEX = r'^[a-z0-9]+(?:-[a-z0-9]+)*$'

# Slugs which never resolve to a link (taken by the frontend)
DEFAULT_RESERVED_SLUGS = ('dashboard',)

# Redirect status codes a deployment may choose from
DEFAULT_REDIRECT_STATUS_CODE = 301
ALLOWED_REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})

# Access log stream is capped at roughly this many entries
DEFAULT_ACCESS_LOG_MAX_LENGTH = 100_000

# Seconds a handler waits for in-flight hit count writes before responding
HIT_PERSIST_DRAIN_TIMEOUT = 2.0

# Application environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
PROJECT_ROOT_ENV = 'PROJECT_ROOT'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig environment variables
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
