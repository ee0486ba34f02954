"""
Pydantic models for orders.

``OrderCreate`` is deliberately permissive: every field is optional so
that missing or empty values reach ``OrderRepository.insert`` and are
reported with a single 400 message rather than a per-field schema
error.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    """Schema for submitting an order."""

    id: Optional[Union[int, str]] = Field(None, example=1001)
    bookedSpaces: Optional[int] = Field(None, example=2)
    name: Optional[str] = Field(None, example="Jane Doe")
    phoneNum: Optional[Union[str, int]] = Field(None, example="07123456789")


class OrderRead(BaseModel):
    storage_id: str = Field(..., alias="_id")
    id: Union[int, str]
    bookedSpaces: int
    name: Optional[str] = None
    phoneNum: Optional[Union[str, int]] = None
    fulfilled: bool = False

    model_config = {
        "populate_by_name": True,
    }


class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: str


class ReconcileResponse(BaseModel):
    message: str = Field(..., example="Lesson and orders successfully updated.")
    newAvailableSpaces: int = Field(..., example=5)
