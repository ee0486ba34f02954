"""Tests for MongoDocumentStore using a mocked Motor database."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from lesson_booking_api.app.core.db import MongoDocumentStore
from lesson_booking_api.app.core.exceptions import StoreError, StoreUnavailable


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def mongo_store(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return MongoDocumentStore(database)


@pytest.mark.asyncio
class TestMongoDocumentStore:
    async def test_find_returns_all_documents(self, mongo_store, collection):
        collection.find.return_value.to_list = AsyncMock(return_value=[{"_id": 1}, {"_id": 2}])

        result = await mongo_store.find("products", {"topic": "Math"})

        assert result == [{"_id": 1}, {"_id": 2}]
        collection.find.assert_called_once_with({"topic": "Math"})

    async def test_update_one_returns_modified_count(self, mongo_store, collection):
        collection.update_one = AsyncMock(return_value=MagicMock(modified_count=1))

        assert await mongo_store.update_one("products", {"_id": 1}, {"$set": {"a": 1}}) == 1

    async def test_update_many_returns_modified_count(self, mongo_store, collection):
        collection.update_many = AsyncMock(return_value=MagicMock(modified_count=0))

        assert await mongo_store.update_many("order", {"id": "x"}, {"$set": {"fulfilled": True}}) == 0

    async def test_insert_one_returns_generated_id(self, mongo_store, collection):
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="abc"))

        assert await mongo_store.insert_one("order", {"id": "x"}) == "abc"

    async def test_connection_failure_is_store_unavailable(self, mongo_store, collection):
        collection.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

        with pytest.raises(StoreUnavailable):
            await mongo_store.find_one("products", {"_id": 1})
        collection.find_one.assert_awaited_once()

    async def test_other_driver_errors_are_store_errors(self, mongo_store, collection):
        collection.update_one = AsyncMock(side_effect=OperationFailure("bad update"))

        with pytest.raises(StoreError) as exc_info:
            await mongo_store.update_one("products", {"_id": 1}, {"$bad": {}})
        assert not isinstance(exc_info.value, StoreUnavailable)
