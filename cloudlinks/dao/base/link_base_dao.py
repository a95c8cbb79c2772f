"""Abstract base class for link data access objects (DAOs).

This class establishes a consistent contract for all link DAO implementations,
regardless of the underlying key-value store (e.g., Redis, DynamoDB).

Responsibilities:
    - Provide an interface for reading and writing LinkRecord objects by key.
    - Standardize error handling across multiple data store implementations.

NOTE:
    - The store provides no compare-and-swap through this interface. Writers
      do read-modify-write, so concurrent updates of one record can be lost.
    - Records expire through the store (`expiration`); the DAO never deletes.
"""

from abc import ABC, abstractmethod

from cloudlinks.models import LinkRecord
from cloudlinks.types import LinkMetadata


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs).

    Methods:
        get(key: str, cache_ttl: int | None = None, **kwargs) -> LinkRecord | None:
            Retrieve a LinkRecord by key, optionally through a bounded-TTL read cache.
            Returns None if not found.
            Raises MalformedLinkError if the stored value is not a link record.
            Raises DataStoreError on connection or read failure.

        put(key: str, link: LinkRecord, expiration: int | None = None, **kwargs) -> LinkBaseDAO:
            Store a LinkRecord and its side-channel metadata, expiring at `expiration`.
            Raises DataStoreError on connection or write failure.

        metadata(key: str, **kwargs) -> LinkMetadata:
            Return the side-channel metadata stored with a record (empty if none).
            Raises DataStoreError on connection or read failure.
    """

    @abstractmethod
    def get(self, key: str, cache_ttl: int | None = None, **kwargs) -> LinkRecord | None:
        """Retrieve a LinkRecord from the data store by its key.

        Args:
            key (str):
                Slug under which the record is stored (verbatim or lowercased).

            cache_ttl (int | None):
                Seconds a cached read may be served for. None reads the store directly.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkRecord | None: The record if found, otherwise None.
        """
        pass

    @abstractmethod
    def put(self, key: str, link: LinkRecord, expiration: int | None = None, **kwargs) -> 'LinkBaseDAO':
        """Store a LinkRecord under its key.

        Args:
            key (str):
                Slug under which the record is stored.

            link (LinkRecord):
                Record to store.

            expiration (int | None):
                Epoch seconds at which the store drops the record. None keeps it.

        Returns:
            LinkBaseDAO: self (for method chaining)
        """
        pass

    @abstractmethod
    def metadata(self, key: str, **kwargs) -> LinkMetadata:
        """Return the side-channel metadata stored next to a LinkRecord.

        Args:
            key (str):
                Slug under which the record is stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkMetadata: `expiration`, `url` and `comment` when set, otherwise an empty dict.
        """
        pass
