"""Application-wide exceptions (configuration and environment).

Exceptions raised by the data access layer live in `cloudlinks.dao.exceptions`.
"""


class CloudLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:cloudlinks_error'


class ConfigurationError(CloudLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
