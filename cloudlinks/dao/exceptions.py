"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    MalformedLinkError:
        Raised when a stored link value can't be decoded into a LinkRecord.

Example:
    >>> from cloudlinks.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    cloudlinks.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass


class MalformedLinkError(DAOError):
    """Exception raised when a stored link value is not a valid link record."""

    pass
