"""
Lesson search endpoint.

``GET /search?q=`` matches the term case-insensitively against topic
and location as well as the textual form of price and available
spaces.  Omitting ``q`` returns every lesson.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...core.exceptions import LessonBookingError
from ...schemas.lesson import LessonRead
from ...services.lesson_repository import LessonRepository
from ..deps import get_lesson_repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search", response_model=List[LessonRead], response_model_exclude_unset=True)
async def search_lessons(
    q: Optional[str] = Query(None, description="Text to look for"),
    lessons: LessonRepository = Depends(get_lesson_repository),
) -> List[LessonRead]:
    try:
        return await lessons.search(q)
    except LessonBookingError as e:
        logger.error("Error searching lessons for %r: %s", q, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error searching lessons in database.",
        ) from e
