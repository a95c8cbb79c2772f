from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping


class LinkKind(StrEnum):
    """How a resolved link is served"""

    REDIRECT = 'redirect'
    TEXT = 'text'


def infer_link_kind(link_type: str | None, url: str | None, content: str | None) -> LinkKind:
    """Classify a record as TEXT if typed so, or if it has content but no URL"""
    if link_type == LinkKind.TEXT or (content and not url):
        return LinkKind.TEXT
    return LinkKind.REDIRECT


@dataclass(frozen=True)
class LinkRecord:
    """Represent a short link record stored under `link:<slug>`.

    A record either redirects to `url` or renders Markdown `content` as a
    page; `kind` tells which and is fixed when the record is built.

    Attributes:
        slug (str):
            Unique short identifier, also the record's key suffix.
        url (Optional[str]):
            Redirect destination.
        content (Optional[str]):
            Markdown source for text links.
        link_type (Optional[str]):
            Raw `type` as stored (e.g. 'text').
        title, description, comment (Optional[str]):
            Display and admin metadata.
        hit_count (int):
            Number of successful views since creation or last reset.
        first_hit_at (Optional[int]):
            Epoch seconds of the first view since creation or last reset.
        max_hits (Optional[int]):
            View ceiling; the link is exhausted once `hit_count >= max_hits`.
        view_expire_seconds (Optional[int]):
            Self-destruct window measured from `first_hit_at`.
        expiration (Optional[int]):
            Epoch seconds at which the store drops the record.
        created_at, updated_at (Optional[int]):
            Epoch seconds of creation and last administrative change.
        extra (Mapping[str, Any]):
            Stored fields this service does not interpret, written back as-is.

    Example:
        >>> link = LinkRecord(slug='note', content='# Hi', link_type='text', max_hits=1)
        >>> link.kind
        <LinkKind.TEXT: 'text'>
        >>> link.hit_count
        0
    """

    slug: str
    url: str | None = None
    content: str | None = None
    link_type: str | None = None
    title: str | None = None
    description: str | None = None
    comment: str | None = None
    hit_count: int = 0
    first_hit_at: int | None = None
    max_hits: int | None = None
    view_expire_seconds: int | None = None
    expiration: int | None = None
    created_at: int | None = None
    updated_at: int | None = None
    kind: LinkKind | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.kind is None:
            object.__setattr__(self, 'kind', infer_link_kind(self.link_type, self.url, self.content))
        object.__setattr__(self, 'extra', MappingProxyType(dict(self.extra)))

    @property
    def view_expires_at(self) -> int | None:
        """Epoch seconds at which the self-destruct timer runs out (if running)"""
        if self.view_expire_seconds and self.first_hit_at:
            return self.first_hit_at + self.view_expire_seconds
        return None
