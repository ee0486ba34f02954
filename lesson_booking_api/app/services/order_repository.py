"""
Typed access to the orders collection.

Orders reference a lesson through the lesson's business ``id`` rather
than its store identifier.  They are created unfulfilled and later
flipped to ``fulfilled`` in bulk by the fulfillment engine.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from bson import ObjectId

from ..core.db import DocumentStore
from ..core.exceptions import ValidationError
from ..schemas.order import OrderRead

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "bookedSpaces", "name", "phoneNum")

LessonRef = Union[int, str]


def _storage_id(value: str) -> Any:
    # Orders inserted by this service always carry ObjectIds; seed data
    # may use plain strings.
    return ObjectId(value) if ObjectId.is_valid(value) else value


class OrderRepository:
    """Repository over the orders (``order``) collection."""

    def __init__(self, store: DocumentStore, collection: str = "order") -> None:
        self._store = store
        self._collection = collection

    async def find_unfulfilled_by_lesson_ref(self, lesson_ref: LessonRef) -> List[OrderRead]:
        documents = await self._store.find(
            self._collection, {"id": lesson_ref, "fulfilled": False}
        )
        return [OrderRead.model_validate({**doc, "_id": str(doc["_id"])}) for doc in documents]

    async def mark_fulfilled(
        self, lesson_ref: LessonRef, order_ids: Optional[Sequence[str]] = None
    ) -> int:
        """Flip every still-unfulfilled order for ``lesson_ref`` to fulfilled.

        When ``order_ids`` is given only those orders are eligible, so
        orders submitted after the caller took its snapshot are left for
        the next reconciliation.  Returns the number of modified orders.
        """
        filter: Dict[str, Any] = {"id": lesson_ref, "fulfilled": False}
        if order_ids is not None:
            filter["_id"] = {"$in": [_storage_id(order_id) for order_id in order_ids]}
        return await self._store.update_many(
            self._collection, filter, {"$set": {"fulfilled": True}}
        )

    async def insert(self, order: Mapping[str, Any]) -> Any:
        """Validate and store a new, unfulfilled order.

        Raises ``ValidationError`` without writing anything when a
        required field is missing or empty, or when ``bookedSpaces`` is
        not a positive integer.
        """
        missing = [field for field in REQUIRED_FIELDS if not order.get(field)]
        if missing:
            logger.info("Rejected order with missing fields: %s", ", ".join(missing))
            raise ValidationError("All fields (id, bookedSpaces, name, phoneNum) are required.")
        booked = order["bookedSpaces"]
        if isinstance(booked, bool) or not isinstance(booked, int) or booked < 1:
            raise ValidationError("bookedSpaces must be a positive integer.")

        record = {field: order[field] for field in REQUIRED_FIELDS}
        record["fulfilled"] = False
        inserted_id = await self._store.insert_one(self._collection, record)
        logger.info(
            "Stored order %s for lesson %s (%s spaces)", inserted_id, record["id"], booked
        )
        return inserted_id
