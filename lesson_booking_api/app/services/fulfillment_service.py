"""
Order fulfillment: reconcile a lesson's capacity with its pending orders.

A reconciliation reads the lesson, collects every unfulfilled order
that references the lesson's business ``id``, deducts the booked
spaces from ``availableSpaces`` and marks those orders fulfilled::

    Fetched -> CapacityComputed -> LessonUpdated -> OrdersMarked -> Done

Each step either succeeds or raises; earlier writes are never rolled
back.  The store offers no multi-document transaction here, so two
concurrent reconciliations of the same lesson could both read the same
pending orders.  With ``optimistic_locking`` enabled the capacity write
is conditional on the lesson ``version`` read in the first step, and a
reconciliation that loses the race starts over against the fresh
lesson, at most ``max_attempts`` times.

Capacity is not floored: overbooking drives ``availableSpaces``
negative unless ``clamp_available_spaces`` is set.
"""

import logging
from dataclasses import dataclass
from typing import List

from ..core.exceptions import (
    LessonNotFound,
    LessonUpdateFailed,
    NoPendingOrders,
    OrderUpdateFailed,
    ReconciliationConflict,
)
from ..schemas.lesson import LessonRead
from ..schemas.order import OrderRead
from .lesson_repository import LessonRepository
from .order_repository import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    new_available_spaces: int
    fulfilled_orders: int


class _VersionConflict(Exception):
    pass


class FulfillmentService:
    """Applies pending orders to lesson capacity."""

    def __init__(
        self,
        lessons: LessonRepository,
        orders: OrderRepository,
        optimistic_locking: bool = True,
        max_attempts: int = 3,
        clamp_available_spaces: bool = False,
    ) -> None:
        self._lessons = lessons
        self._orders = orders
        self._optimistic_locking = optimistic_locking
        self._max_attempts = max(1, max_attempts) if optimistic_locking else 1
        self._clamp = clamp_available_spaces

    async def reconcile(self, lesson_id: str) -> ReconcileResult:
        """Reconcile the lesson stored under ``lesson_id``.

        Raises ``InvalidId``, ``LessonNotFound``, ``NoPendingOrders``,
        ``LessonUpdateFailed``, ``OrderUpdateFailed`` or, when every
        attempt lost a version race, ``ReconciliationConflict``.  Store
        errors propagate unchanged.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                return await self._reconcile_once(lesson_id)
            except _VersionConflict:
                logger.warning(
                    "Version conflict reconciling lesson %s (attempt %d/%d)",
                    lesson_id,
                    attempt,
                    self._max_attempts,
                )
        raise ReconciliationConflict(lesson_id, self._max_attempts)

    def _pending(self, lesson: LessonRead, orders: List[OrderRead]) -> List[OrderRead]:
        if not self._optimistic_locking or not lesson.reconciledOrderIds:
            return orders
        # Orders already deducted by the reconciliation that wrote the
        # current version but not yet marked fulfilled by it.
        in_flight = set(lesson.reconciledOrderIds)
        return [order for order in orders if order.storage_id not in in_flight]

    async def _reconcile_once(self, lesson_id: str) -> ReconcileResult:
        lesson = await self._lessons.get_by_id(lesson_id)
        pending = self._pending(
            lesson, await self._orders.find_unfulfilled_by_lesson_ref(lesson.id)
        )
        if not pending:
            raise NoPendingOrders(lesson.id)

        booked = sum(order.bookedSpaces for order in pending)
        new_available_spaces = lesson.availableSpaces - booked
        if new_available_spaces < 0:
            if self._clamp:
                logger.info(
                    "Lesson %s overbooked by %d; clamping capacity at zero",
                    lesson_id,
                    -new_available_spaces,
                )
                new_available_spaces = 0
            else:
                logger.warning(
                    "Lesson %s overbooked: capacity becomes %d", lesson_id, new_available_spaces
                )

        order_ids = [order.storage_id for order in pending]
        if self._optimistic_locking:
            updated = await self._lessons.set_available_spaces(
                lesson_id,
                new_available_spaces,
                expected_version=lesson.version,
                reconciled_order_ids=order_ids,
            )
            if not updated:
                try:
                    current = await self._lessons.get_by_id(lesson_id)
                except LessonNotFound:
                    raise LessonUpdateFailed(lesson_id) from None
                if current.version != lesson.version:
                    raise _VersionConflict()
                raise LessonUpdateFailed(lesson_id)
        elif new_available_spaces == lesson.availableSpaces:
            # Clamped at an already-empty lesson: an unchanged $set modifies
            # nothing, so skip the write and only fulfil the orders.
            logger.info("Lesson %s capacity unchanged at %d", lesson_id, new_available_spaces)
        elif not await self._lessons.set_available_spaces(lesson_id, new_available_spaces):
            raise LessonUpdateFailed(lesson_id)

        marked = await self._orders.mark_fulfilled(lesson.id, order_ids)
        if marked == 0:
            raise OrderUpdateFailed(lesson.id)
        if marked < len(pending):
            logger.warning(
                "Lesson %s: expected to fulfil %d orders but only %d were still pending",
                lesson_id,
                len(pending),
                marked,
            )

        logger.info(
            "Reconciled lesson %s: %d orders, %d spaces booked, %d now available",
            lesson_id,
            marked,
            booked,
            new_available_spaces,
        )
        return ReconcileResult(new_available_spaces=new_available_spaces, fulfilled_orders=marked)
