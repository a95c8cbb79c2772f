from dataclasses import dataclass


# fmt: off
@dataclass(frozen=True)
class AccessLogEntry:
    slug: str                       # Slug of the viewed link
    timestamp: int                  # Epoch seconds of the view
    url: str | None = None          # Redirect destination (None for text links)
    kind: str | None = None         # 'redirect' or 'text'
    user_agent: str | None = None
    ip: str | None = None
    referer: str | None = None
    language: str | None = None     # Primary language from Accept-Language
    country: str | None = None      # Viewer country reported by CloudFront
# fmt: on
