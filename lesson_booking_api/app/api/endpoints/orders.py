"""
Order submission endpoint.

The front-end posts orders to ``/collections/order``; any other
collection name is rejected.  Orders are stored unfulfilled and only
affect lesson capacity once the lesson is reconciled.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ...core.exceptions import LessonBookingError, ValidationError
from ...schemas.order import InsertResult, OrderCreate
from ...services.order_repository import OrderRepository
from ..deps import get_order_repository

logger = logging.getLogger(__name__)

ORDER_COLLECTION_PATH = "order"

router = APIRouter()


@router.post("/collections/{collection_name}", response_model=InsertResult)
async def create_order(
    collection_name: str,
    order: Optional[OrderCreate] = None,
    orders: OrderRepository = Depends(get_order_repository),
) -> InsertResult:
    """Submit an order for a lesson.

    All of ``id``, ``bookedSpaces``, ``name`` and ``phoneNum`` are
    required; a 400 is returned when any is missing or empty.
    """
    if collection_name != ORDER_COLLECTION_PATH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid collection name. Use 'order' for creating an order.",
        )
    payload = order.model_dump() if order else {}
    try:
        inserted_id = await orders.insert(payload)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except LessonBookingError as e:
        logger.error("Error storing order for lesson %s: %s", payload.get("id"), e)
        raise HTTPException(status_code=e.status_code, detail="Error storing order.") from e
    return InsertResult(acknowledged=True, insertedId=str(inserted_id))
