from abc import ABC, abstractmethod

from cloudlinks.models import AccessLogEntry


class AccessLogBaseDAO(ABC):
    """Interface for access log writers.

    Methods:
        write(entry: AccessLogEntry, **kwargs) -> AccessLogBaseDAO:
            Append one link view to the access log.
            Raises DataStoreError on connection or write failure.
    """

    @abstractmethod
    def write(self, entry: AccessLogEntry, **kwargs) -> 'AccessLogBaseDAO':
        pass
