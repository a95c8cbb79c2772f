from cloudlinks.dao.base.link_base_dao import LinkBaseDAO
from cloudlinks.dao.base.access_log_base_dao import AccessLogBaseDAO


__all__ = [
    'LinkBaseDAO',
    'AccessLogBaseDAO',
]
