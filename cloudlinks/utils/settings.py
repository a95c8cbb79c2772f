"""Link resolution settings

The `links` section of a Lambda's AppConfig document is parsed into an
immutable `LinkSettings` instance. Unknown keys are ignored and missing keys
fall back to defaults, so an empty section yields a working deployment.

Example:
    >>> settings = LinkSettings.from_config({'case_sensitive': True, 'redirect_status_code': 302})
    >>> settings.redirect_status_code
    302
    >>> settings.is_reserved('dashboard')
    True
"""

import re
from dataclasses import dataclass, field
from typing import Any

from cloudlinks.exceptions import BadConfigurationError
from cloudlinks.utils.constants import (
    DEFAULT_SLUG_REGEX,
    DEFAULT_RESERVED_SLUGS,
    DEFAULT_LINK_CACHE_TTL,
    DEFAULT_PREVIEW_TTL,
    DEFAULT_REDIRECT_STATUS_CODE,
    ALLOWED_REDIRECT_STATUS_CODES,
    DEFAULT_ACCESS_LOG_MAX_LENGTH,
)


# fmt: off
@dataclass(frozen=True)
class LinkSettings:
    slug_pattern: re.Pattern = field(default_factory=lambda: re.compile(DEFAULT_SLUG_REGEX, re.IGNORECASE))
    reserved_slugs: frozenset[str] = frozenset(DEFAULT_RESERVED_SLUGS)
    home_url: str | None = None                                  # Where `GET /` redirects to (if set)
    cache_ttl: int = DEFAULT_LINK_CACHE_TTL                      # Store read-cache TTL in seconds
    redirect_with_query: bool = False                            # Forward request query to destination
    case_sensitive: bool = False                                 # Look slugs up verbatim (not lowercased)
    redirect_status_code: int = DEFAULT_REDIRECT_STATUS_CODE
    preview_mode: bool = False                                   # Read-only deployment
    preview_ttl: int = DEFAULT_PREVIEW_TTL                       # Max link lifetime in preview mode
    access_log_enabled: bool = True
    access_log_max_length: int = DEFAULT_ACCESS_LOG_MAX_LENGTH
# fmt: on

    @classmethod
    def from_config(cls, links: dict[str, Any] | None) -> 'LinkSettings':
        """Build settings from the `links` AppConfig section

        Raises:
            BadConfigurationError:
                If any provided value has the wrong type or is out of range.
        """
        links = links or {}
        defaults = cls()

        # Only the default pattern ignores case; a configured one is used as written
        try:
            slug_pattern = re.compile(links['slug_regex']) if 'slug_regex' in links else defaults.slug_pattern
        except (re.error, TypeError) as e:
            raise BadConfigurationError(f"Invalid 'slug_regex': {links.get('slug_regex')!r}") from e

        reserved = links.get('reserved_slugs', DEFAULT_RESERVED_SLUGS)
        if isinstance(reserved, str) or not all(isinstance(slug, str) for slug in reserved):
            raise BadConfigurationError("'reserved_slugs' must be a list of strings.")

        home_url = links.get('home_url') or None
        if home_url is not None and not isinstance(home_url, str):
            raise BadConfigurationError("'home_url' must be a string.")

        redirect_status_code = _integer(links, 'redirect_status_code', defaults.redirect_status_code)
        if redirect_status_code not in ALLOWED_REDIRECT_STATUS_CODES:
            allowed = ', '.join(str(code) for code in sorted(ALLOWED_REDIRECT_STATUS_CODES))
            raise BadConfigurationError(f"'redirect_status_code' must be one of {allowed} (given: {redirect_status_code}).")

        return cls(
            slug_pattern=slug_pattern,
            reserved_slugs=frozenset(reserved),
            home_url=home_url,
            cache_ttl=_integer(links, 'cache_ttl', defaults.cache_ttl),
            redirect_with_query=_boolean(links, 'redirect_with_query', defaults.redirect_with_query),
            case_sensitive=_boolean(links, 'case_sensitive', defaults.case_sensitive),
            redirect_status_code=redirect_status_code,
            preview_mode=_boolean(links, 'preview_mode', defaults.preview_mode),
            preview_ttl=_integer(links, 'preview_ttl', defaults.preview_ttl),
            access_log_enabled=_boolean(links, 'access_log_enabled', defaults.access_log_enabled),
            access_log_max_length=_integer(links, 'access_log_max_length', defaults.access_log_max_length),
        )

    def is_reserved(self, slug: str) -> bool:
        return slug in self.reserved_slugs

    def is_valid_slug(self, slug: str) -> bool:
        return self.slug_pattern.match(slug) is not None

    def lookup_key(self, slug: str) -> str:
        """Key under which a slug's link record is looked up first"""
        return slug if self.case_sensitive else slug.lower()


def _integer(links: dict[str, Any], name: str, default: int) -> int:
    value = links.get(name, default)
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise BadConfigurationError(f"'{name}' must be a non-negative integer (given: {value!r}).")
    return value


def _boolean(links: dict[str, Any], name: str, default: bool) -> bool:
    value = links.get(name, default)
    if not isinstance(value, bool):
        raise BadConfigurationError(f"'{name}' must be a boolean (given: {value!r}).")
    return value
