"""Serialization of link records to and from the store's JSON values.

Records are stored as JSON objects with camelCase field names:

    {
        "slug": "note",
        "content": "# Hi",
        "type": "text",
        "hitCount": 1,
        "firstHitAt": 1760000000,
        "maxHits": 1,
        "viewExpireSeconds": 60,
        "createdAt": 1750000000
    }

Fields which are None are left out when encoding, so clearing e.g.
`first_hit_at` removes `firstHitAt` from the stored value. Fields this
service doesn't know about are kept in `LinkRecord.extra` and written back.

Functions:
    decode_link(raw: str | bytes) -> LinkRecord
    encode_link(link: LinkRecord) -> str
    link_from_dict(data: dict) -> LinkRecord
    link_to_dict(link: LinkRecord) -> dict
"""

import json
from typing import Any

from cloudlinks.models.link_model import LinkRecord, infer_link_kind
from cloudlinks.dao.exceptions import MalformedLinkError


# fmt: off
_STRING_FIELDS = {
    'slug': 'slug',
    'url': 'url',
    'content': 'content',
    'type': 'link_type',
    'title': 'title',
    'description': 'description',
    'comment': 'comment',
}
_INTEGER_FIELDS = {
    'hitCount': 'hit_count',
    'firstHitAt': 'first_hit_at',
    'maxHits': 'max_hits',
    'viewExpireSeconds': 'view_expire_seconds',
    'expiration': 'expiration',
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
}
# fmt: on


def _integer(name: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedLinkError(f"Link field '{name}' must be a number (given: {value!r}).")
    return int(value)


def link_from_dict(data: dict[str, Any]) -> LinkRecord:
    """Build a LinkRecord from a decoded JSON object

    Raises:
        MalformedLinkError:
            If the object has no slug or a field has the wrong type.
    """
    if not isinstance(data, dict):
        raise MalformedLinkError(f'Link value must be a JSON object (given: {type(data).__name__}).')

    values: dict[str, Any] = {}
    for wire_name, name in _STRING_FIELDS.items():
        value = data.get(wire_name)
        if value is not None and not isinstance(value, str):
            raise MalformedLinkError(f"Link field '{wire_name}' must be a string (given: {value!r}).")
        values[name] = value
    for wire_name, name in _INTEGER_FIELDS.items():
        values[name] = _integer(wire_name, data.get(wire_name))

    if not values['slug']:
        raise MalformedLinkError("Link value is missing 'slug'.")
    values['hit_count'] = values['hit_count'] or 0

    known = _STRING_FIELDS.keys() | _INTEGER_FIELDS.keys()
    extra = {key: value for key, value in data.items() if key not in known}

    return LinkRecord(
        **values,
        kind=infer_link_kind(values['link_type'], values['url'], values['content']),
        extra=extra,
    )


def link_to_dict(link: LinkRecord) -> dict[str, Any]:
    """Return the JSON-ready representation of a LinkRecord"""
    data: dict[str, Any] = {}
    for wire_name, name in (_STRING_FIELDS | _INTEGER_FIELDS).items():
        value = getattr(link, name)
        if value is not None:
            data[wire_name] = value
    for key, value in link.extra.items():
        data.setdefault(key, value)
    return data


def decode_link(raw: str | bytes) -> LinkRecord:
    """Decode a stored JSON value into a LinkRecord

    Raises:
        MalformedLinkError:
            If the value is not valid JSON or not a valid link object.

    Example:
        >>> link = decode_link('{"slug": "x", "url": "https://example.com", "hitCount": 3}')
        >>> link.hit_count, link.kind
        (3, <LinkKind.REDIRECT: 'redirect'>)
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedLinkError(f'Link value is not valid JSON: {e}') from e
    return link_from_dict(data)


def encode_link(link: LinkRecord) -> str:
    return json.dumps(link_to_dict(link))
