"""Expiration rules for link records

A record stops being servable when either:
    - it is exhausted: `max_hits` is set and `hit_count >= max_hits`;
    - its self-destruct timer ran out: `now >= first_hit_at + view_expire_seconds`.

Store-level expiration (`LinkRecord.expiration`) is enforced by the store
itself; `compute_expiration()` only decides which instant is written.
"""

from enum import StrEnum

from cloudlinks.models import LinkRecord


class Servability(StrEnum):
    SERVABLE = 'servable'
    EXHAUSTED = 'exhausted'
    VIEW_EXPIRED = 'view_expired'


def is_exhausted(link: LinkRecord) -> bool:
    return link.max_hits is not None and link.hit_count >= link.max_hits


def is_view_expired(link: LinkRecord, now: int) -> bool:
    expires_at = link.view_expires_at
    return expires_at is not None and now >= expires_at


def classify(link: LinkRecord, now: int) -> Servability:
    """Decide whether a record may be served at `now`

    The hit limit is checked first; both checks only read the record.

    Example:
        >>> classify(LinkRecord(slug='note', content='# Hi', max_hits=1, hit_count=1), now=0)
        <Servability.EXHAUSTED: 'exhausted'>
    """
    if is_exhausted(link):
        return Servability.EXHAUSTED
    if is_view_expired(link, now):
        return Servability.VIEW_EXPIRED
    return Servability.SERVABLE


def compute_expiration(expiration: int | None, now: int, preview_mode: bool = False, preview_ttl: int = 0) -> int | None:
    """Return the store-level expiration to persist for a record

    In preview mode no link may outlive `now + preview_ttl`; otherwise the
    record's own expiration is kept (None means it never expires).

    Example:
        >>> compute_expiration(None, now=1000, preview_mode=True, preview_ttl=60)
        1060
        >>> compute_expiration(5000, now=1000)
        5000
    """
    if preview_mode:
        preview_expiration = now + preview_ttl
        if expiration is None or expiration > preview_expiration:
            return preview_expiration
    return expiration
