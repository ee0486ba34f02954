"""
Typed access to the lessons collection.

Lessons are looked up by their store identifier (``_id``), which must
be a well-formed ObjectId string.  Capacity writes report whether a
record was actually modified so that callers can detect lost updates;
a conditional variant guards the write with the lesson's ``version``
field for optimistic concurrency.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from bson.errors import InvalidId as BsonInvalidId

from ..core.db import Document, DocumentStore
from ..core.exceptions import InvalidId, LessonNotFound
from ..schemas.lesson import LessonRead

logger = logging.getLogger(__name__)

# Sentinel for ``set_available_spaces``: write regardless of version.
ANY_VERSION = object()

SEARCH_TEXT_FIELDS = ("topic", "location")
SEARCH_NUMERIC_FIELDS = ("price", "availableSpaces")


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (BsonInvalidId, TypeError) as e:
        raise InvalidId(f"Invalid lesson id: {value!r}") from e


def to_lesson(document: Document) -> LessonRead:
    data = dict(document)
    data["_id"] = str(data["_id"])
    return LessonRead.model_validate(data)


def build_search_filter(term: Optional[str]) -> Dict[str, Any]:
    """Build a case-insensitive substring filter for ``term``.

    The term is matched literally.  Numeric fields are compared through
    their string form so that searching for ``"10"`` finds a price of
    ``100`` or ten available spaces.
    """
    pattern = re.escape(term or "")
    clauses: List[Dict[str, Any]] = [
        {field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_TEXT_FIELDS
    ]
    clauses.extend(
        {
            "$expr": {
                "$regexMatch": {
                    "input": {"$toString": f"${field}"},
                    "regex": pattern,
                    "options": "i",
                }
            }
        }
        for field in SEARCH_NUMERIC_FIELDS
    )
    return {"$or": clauses}


class LessonRepository:
    """Repository over the lessons (``products``) collection."""

    def __init__(self, store: DocumentStore, collection: str = "products") -> None:
        self._store = store
        self._collection = collection

    async def find_by_id(self, lesson_id: str) -> Optional[LessonRead]:
        document = await self._store.find_one(self._collection, {"_id": to_object_id(lesson_id)})
        return to_lesson(document) if document is not None else None

    async def get_by_id(self, lesson_id: str) -> LessonRead:
        lesson = await self.find_by_id(lesson_id)
        if lesson is None:
            raise LessonNotFound(lesson_id)
        return lesson

    async def set_available_spaces(
        self,
        lesson_id: str,
        new_value: int,
        expected_version: Any = ANY_VERSION,
        reconciled_order_ids: Optional[Sequence[str]] = None,
    ) -> bool:
        """Write a new capacity for the lesson.

        Returns ``False`` when the write modified no record.  When
        ``expected_version`` is given (``None`` meaning the lesson has
        never been versioned) the write only applies if the stored
        version still matches, and the version is incremented.  The ids
        of the orders being consumed are recorded alongside so that a
        reconciliation retrying against the new version does not count
        them a second time.
        """
        filter: Dict[str, Any] = {"_id": to_object_id(lesson_id)}
        patch: Dict[str, Any] = {"$set": {"availableSpaces": new_value}}
        if expected_version is not ANY_VERSION:
            if expected_version is None:
                filter["version"] = {"$exists": False}
            else:
                filter["version"] = expected_version
            patch["$inc"] = {"version": 1}
            patch["$set"]["reconciledOrderIds"] = list(reconciled_order_ids or [])
        modified = await self._store.update_one(self._collection, filter, patch)
        if not modified:
            logger.warning(
                "Capacity write for lesson %s modified no records (expected version %s)",
                lesson_id,
                "any" if expected_version is ANY_VERSION else expected_version,
            )
        return modified > 0

    async def list_all(self) -> List[LessonRead]:
        documents = await self._store.find(self._collection, {})
        return [to_lesson(doc) for doc in documents]

    async def search(self, term: Optional[str]) -> List[LessonRead]:
        documents = await self._store.find(self._collection, build_search_filter(term))
        return [to_lesson(doc) for doc in documents]
