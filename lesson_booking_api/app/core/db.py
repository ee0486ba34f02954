"""
Document store gateway.

This module wraps a MongoDB database (accessed asynchronously through
``motor``) behind a tiny collection-oriented interface: ``find``,
``find_one``, ``update_one``, ``update_many`` and ``insert_one``.
Repositories only ever talk to a ``DocumentStore`` and never import the
driver directly, which keeps them testable against an in-memory store.

The gateway performs exactly one driver call per method and never
retries.  Driver errors are re-raised as ``StoreUnavailable`` (lost or
unreachable server) or ``StoreError`` (anything else).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.server_api import ServerApi

from .config import StoreConfig
from .exceptions import StoreError, StoreUnavailable

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Filter = Mapping[str, Any]


class DocumentStore(Protocol):
    """Read/write access to named record collections."""

    async def find(self, collection: str, filter: Filter) -> List[Document]:
        ...

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        ...

    async def update_one(self, collection: str, filter: Filter, patch: Mapping[str, Any]) -> int:
        ...

    async def update_many(self, collection: str, filter: Filter, patch: Mapping[str, Any]) -> int:
        ...

    async def insert_one(self, collection: str, record: Document) -> Any:
        ...


def _translate(operation: str, collection: str, exc: PyMongoError) -> StoreError:
    logger.error("Store %s on '%s' failed: %s", operation, collection, exc)
    if isinstance(exc, ConnectionFailure):
        return StoreUnavailable(f"Document store unavailable during {operation} on '{collection}'")
    return StoreError(f"Document store rejected {operation} on '{collection}': {exc}")


class MongoDocumentStore:
    """``DocumentStore`` backed by a shared ``AsyncIOMotorDatabase``."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._db = database

    async def find(self, collection: str, filter: Filter) -> List[Document]:
        try:
            return await self._db[collection].find(filter).to_list(length=None)
        except PyMongoError as e:
            raise _translate("find", collection, e) from e

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        try:
            return await self._db[collection].find_one(filter)
        except PyMongoError as e:
            raise _translate("find_one", collection, e) from e

    async def update_one(self, collection: str, filter: Filter, patch: Mapping[str, Any]) -> int:
        try:
            result = await self._db[collection].update_one(filter, patch)
        except PyMongoError as e:
            raise _translate("update_one", collection, e) from e
        return result.modified_count

    async def update_many(self, collection: str, filter: Filter, patch: Mapping[str, Any]) -> int:
        try:
            result = await self._db[collection].update_many(filter, patch)
        except PyMongoError as e:
            raise _translate("update_many", collection, e) from e
        return result.modified_count

    async def insert_one(self, collection: str, record: Document) -> Any:
        try:
            result = await self._db[collection].insert_one(record)
        except PyMongoError as e:
            raise _translate("insert_one", collection, e) from e
        return result.inserted_id


def create_client(config: StoreConfig, timeout_ms: int) -> AsyncIOMotorClient:
    """Create the long-lived Motor client.

    The client connects lazily, so this does not block or fail when the
    server is down; the first operation will raise ``StoreUnavailable``
    instead.
    """
    return AsyncIOMotorClient(
        config.uri,
        server_api=ServerApi("1"),
        serverSelectionTimeoutMS=timeout_ms,
    )


def open_store(client: AsyncIOMotorClient, config: StoreConfig) -> MongoDocumentStore:
    return MongoDocumentStore(client[config.db_name])
