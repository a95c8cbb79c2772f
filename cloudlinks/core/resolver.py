"""Resolve request paths to stored link records

Resolution steps for a path such as `/Abc-1/`:
    1. Strip leading/trailing slashes and take the first path segment ('Abc-1').
    2. Reject empty, reserved or malformed slugs, or when no store is available.
    3. Look up the record under 'abc-1' (or 'Abc-1' when case sensitive),
       reading through the store's read cache.
    4. Case-insensitive only: when the lowercased key misses, retry with the
       slug as typed, for records stored under mixed-case keys.
    5. Records with a self-destruct timer are read again bypassing the cache,
       so the remaining time is computed from a fresh `first_hit_at`.

A slug which doesn't resolve is a normal outcome (None), not an error.
"""

import logging
from dataclasses import dataclass

from cloudlinks.models import LinkRecord
from cloudlinks.dao.base import LinkBaseDAO
from cloudlinks.utils.settings import LinkSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLink:
    key: str  # Key the record was found under; writes go back to it
    link: LinkRecord


def candidate_slug(path: str) -> str:
    """Return the first segment of a request path

    Example:
        >>> candidate_slug('/abc/')
        'abc'
        >>> candidate_slug('/abc/extra?x=1')
        'abc'
        >>> candidate_slug('/')
        ''
    """
    path = path.split('?', 1)[0].split('#', 1)[0]
    return path.strip('/').split('/', 1)[0]


class SlugResolver:
    """Turn a request path into a ResolvedLink (or None)

    Example:
        >>> resolver = SlugResolver(dao, LinkSettings())
        >>> resolver.resolve('/abc').link.url
        'https://example.com'
        >>> resolver.resolve('/dashboard') is None
        True
    """

    def __init__(self, dao: LinkBaseDAO | None, settings: LinkSettings):
        self.dao = dao
        self.settings = settings

    def accepts(self, slug: str) -> bool:
        """True if the slug may name a link at all"""
        return bool(slug) and not self.settings.is_reserved(slug) and self.settings.is_valid_slug(slug)

    def resolve(self, path: str) -> ResolvedLink | None:
        if path == '/' and self.settings.home_url:
            return None

        slug = candidate_slug(path)
        if not self.accepts(slug) or self.dao is None:
            return None

        key = self.settings.lookup_key(slug)
        link = self.dao.get(key, cache_ttl=self.settings.cache_ttl)

        if link is None and not self.settings.case_sensitive and key != slug:
            logger.debug('Falling back to original slug.', extra={'slug': slug, 'lowercaseSlug': key})
            key = slug
            link = self.dao.get(key, cache_ttl=self.settings.cache_ttl)

        if link is not None and link.view_expire_seconds:
            link = self.dao.get(key)

        if link is None:
            return None
        return ResolvedLink(key=key, link=link)
