import logging
from dataclasses import replace

from cloudlinks.exceptions import CloudLinksError
from cloudlinks.models import LinkRecord
from cloudlinks.dao.base import LinkBaseDAO
from cloudlinks.utils.settings import LinkSettings
from cloudlinks.core.expiration import compute_expiration


logger = logging.getLogger(__name__)


class PreviewModeError(CloudLinksError):
    """Raised when a mutating operation is attempted in preview mode."""

    error_code = 'app:preview_mode_error'


class ResetOperation:
    """Zero a link's hit count and restart its viewing lifetime

    Example:
        >>> link = ResetOperation(dao, LinkSettings()).reset('abc', now=1760000000)
        >>> link.hit_count, link.first_hit_at, link.updated_at
        (0, None, 1760000000)
    """

    def __init__(self, dao: LinkBaseDAO, settings: LinkSettings):
        self.dao = dao
        self.settings = settings

    def reset(self, slug: str, now: int) -> LinkRecord | None:
        """Reset the record stored under `slug`

        Returns:
            LinkRecord | None: the reset record, or None if no record exists.

        Raises:
            PreviewModeError:
                If the deployment runs in preview mode.
            DataStoreError:
                If the store can't be read or written.
        """
        if self.settings.preview_mode:
            raise PreviewModeError('Preview mode cannot reset links.')

        link = self.dao.get(slug)
        if link is None:
            return None

        updated = replace(link, hit_count=0, first_hit_at=None, updated_at=now)
        # Preview mode was refused above, so this keeps the record's own expiration
        expiration = compute_expiration(
            updated.expiration,
            now,
            preview_mode=self.settings.preview_mode,
            preview_ttl=self.settings.preview_ttl,
        )
        self.dao.put(slug, updated, expiration=expiration)

        logger.debug('Reset link hit count.', extra={'slug': slug, 'expiration': expiration})
        return updated
