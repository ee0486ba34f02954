"""
Pydantic models for lesson documents.

A lesson carries two identifiers: ``_id`` is assigned by the store and
used in URLs, while ``id`` is the business key that orders reference.
Seed documents may carry additional fields (images, descriptions) which
are kept and returned unchanged.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class LessonRead(BaseModel):
    storage_id: str = Field(..., alias="_id", example="65f0c2a1e4b0a1b2c3d4e5f6")
    id: Union[int, str] = Field(..., example=1001)
    topic: Optional[str] = Field(None, example="Math")
    location: Optional[str] = Field(None, example="London")
    price: Optional[Union[int, float]] = Field(None, example=100)
    availableSpaces: int = Field(..., example=5)
    # Bookkeeping for optimistic locking; never serialised.  ``version``
    # is absent on seed data until the first versioned reconciliation.
    version: Optional[int] = Field(None, exclude=True)
    # Orders consumed by the reconciliation that produced ``version``.
    reconciledOrderIds: List[str] = Field(default_factory=list, exclude=True)

    model_config = {
        "populate_by_name": True,
        "extra": "allow",
    }
