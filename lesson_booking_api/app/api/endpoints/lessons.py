"""
Lesson endpoints.

``GET /lessons`` lists every lesson.  ``PUT /collections/products/{id}``
reconciles a lesson against its unfulfilled orders: booked spaces are
deducted from the lesson and the orders are marked fulfilled.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ...core.exceptions import LessonBookingError
from ...schemas.lesson import LessonRead
from ...schemas.order import ReconcileResponse
from ...services.fulfillment_service import FulfillmentService
from ...services.lesson_repository import LessonRepository
from ..deps import get_fulfillment_service, get_lesson_repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/lessons", response_model=List[LessonRead], response_model_exclude_unset=True)
async def list_lessons(
    lessons: LessonRepository = Depends(get_lesson_repository),
) -> List[LessonRead]:
    """Return all lessons in the catalogue."""
    try:
        return await lessons.list_all()
    except LessonBookingError as e:
        logger.error("Error fetching lessons: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving lessons from database.",
        ) from e


@router.put("/collections/products/{lesson_id}", response_model=ReconcileResponse)
async def reconcile_lesson(
    lesson_id: str = Path(..., description="Store identifier (_id) of the lesson"),
    service: FulfillmentService = Depends(get_fulfillment_service),
) -> ReconcileResponse:
    """Apply all unfulfilled orders for a lesson.

    Returns the new number of available spaces.  Responds with 404 when
    the lesson does not exist or has no pending orders, 400 for a
    malformed id, 409 when concurrent updates kept winning and 500 when
    a write did not take effect.
    """
    try:
        result = await service.reconcile(lesson_id)
    except LessonBookingError as e:
        if e.status_code >= 500:
            logger.error("Reconciliation of lesson %s failed: %s", lesson_id, e)
        else:
            logger.info("Reconciliation of lesson %s rejected: %s", lesson_id, e)
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
    except Exception as e:
        logger.exception("Unexpected error reconciling lesson %s", lesson_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error.",
        ) from e
    return ReconcileResponse(
        message="Lesson and orders successfully updated.",
        newAvailableSpaces=result.new_available_spaces,
    )
