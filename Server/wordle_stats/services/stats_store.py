"""
Stats Store

Durable keyed storage for UserStats records. Writes are compare-and-set on
the record version so that concurrent updates to the same user cannot
silently overwrite each other.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..models.stats import UserStats


class StatsStoreError(Exception):
    """The persistence layer could not complete a read or write."""


class StatsAlreadyExistsError(StatsStoreError):
    """A record already exists for the identity being created."""


class StatsNotFoundError(StatsStoreError):
    """The record being written no longer exists."""


class StaleStatsError(StatsStoreError):
    """The record was modified by another writer since it was loaded."""


class StatsStore(ABC):
    """Storage interface consumed by the stats service."""

    @abstractmethod
    def create(self, record: UserStats) -> UserStats:
        """
        Insert a new record.

        Raises:
            StatsAlreadyExistsError: If a record exists for the identity
            StatsStoreError: On storage failure
        """

    @abstractmethod
    def find_by_identity(self, identity: str) -> Optional[UserStats]:
        """Return a copy of the stored record, or None if there is none."""

    @abstractmethod
    def persist(self, record: UserStats) -> UserStats:
        """
        Write back a record loaded at ``record.version``.

        Returns:
            The stored record with its new version

        Raises:
            StaleStatsError: If the stored version no longer matches
            StatsNotFoundError: If the record has been removed
            StatsStoreError: On storage failure
        """


class MongoStatsStore(StatsStore):
    """
    MongoDB-backed stats store.

    Records are stored one document per user, keyed by the ``email`` field
    with a unique index.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        """Create the unique identity index."""
        try:
            self.collection.create_index([("email", ASCENDING)], unique=True)
        except PyMongoError as e:
            raise StatsStoreError(f"Index creation failed: {e}") from e

    def create(self, record: UserStats) -> UserStats:
        stored = record.copy()
        stored.version = 0
        try:
            self.collection.insert_one(stored.to_document())
        except DuplicateKeyError as e:
            raise StatsAlreadyExistsError(f"Stats already exist for {record.identity}") from e
        except PyMongoError as e:
            raise StatsStoreError(f"Insert failed: {e}") from e
        return stored

    def find_by_identity(self, identity: str) -> Optional[UserStats]:
        try:
            document = self.collection.find_one({"email": identity})
        except PyMongoError as e:
            raise StatsStoreError(f"Lookup failed: {e}") from e

        if document is None:
            return None
        return UserStats.from_document(document)

    def persist(self, record: UserStats) -> UserStats:
        fields = record.to_view()
        del fields['email']

        query = {"email": record.identity, "version": record.version}
        if record.version == 0:
            # Documents written before versioning have no version field
            del query["version"]
            query["$or"] = [{"version": 0}, {"version": {"$exists": False}}]

        try:
            document = self.collection.find_one_and_update(
                query,
                {"$set": fields, "$inc": {"version": 1}},
                return_document=ReturnDocument.AFTER
            )
            if document is not None:
                return UserStats.from_document(document)

            # Tell a lost race apart from a vanished record
            exists = self.collection.find_one({"email": record.identity}, {"_id": 1})
        except PyMongoError as e:
            raise StatsStoreError(f"Write failed: {e}") from e

        if exists is None:
            raise StatsNotFoundError(f"No stats for {record.identity}")
        raise StaleStatsError(f"Stats for {record.identity} changed since version {record.version}")


class InMemoryStatsStore(StatsStore):
    """
    Process-local stats store.

    Records are copied on the way in and out, so callers never hold a
    reference to the stored object.
    """

    def __init__(self):
        self._records: Dict[str, UserStats] = {}
        self._lock = threading.Lock()

    def create(self, record: UserStats) -> UserStats:
        with self._lock:
            if record.identity in self._records:
                raise StatsAlreadyExistsError(f"Stats already exist for {record.identity}")
            stored = record.copy()
            stored.version = 0
            self._records[record.identity] = stored
            return stored.copy()

    def find_by_identity(self, identity: str) -> Optional[UserStats]:
        with self._lock:
            stored = self._records.get(identity)
            return stored.copy() if stored else None

    def persist(self, record: UserStats) -> UserStats:
        with self._lock:
            current = self._records.get(record.identity)
            if current is None:
                raise StatsNotFoundError(f"No stats for {record.identity}")
            if current.version != record.version:
                raise StaleStatsError(
                    f"Stats for {record.identity} changed since version {record.version}"
                )
            stored = record.copy()
            stored.version = record.version + 1
            self._records[record.identity] = stored
            return stored.copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
