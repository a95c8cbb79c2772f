from cloudlinks.models.link_model import LinkKind, LinkRecord, infer_link_kind
from cloudlinks.models.access_log_model import AccessLogEntry


__all__ = [
    'LinkKind',
    'LinkRecord',
    'infer_link_kind',
    'AccessLogEntry',
]
