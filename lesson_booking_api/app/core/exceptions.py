"""
Exception hierarchy for the lesson booking service.

Repositories and the fulfillment engine raise these errors and let
them propagate; endpoint handlers translate them into HTTP responses
using the ``status_code`` attached to each class.
"""


class LessonBookingError(Exception):
    """Base class for all service errors."""

    status_code = 500


class ConfigurationError(LessonBookingError):
    """Required configuration is missing or malformed."""


class ValidationError(LessonBookingError):
    """Client input failed validation."""

    status_code = 400


class InvalidId(LessonBookingError):
    """An identifier cannot be converted to the store's reference type."""

    status_code = 400


class NotFound(LessonBookingError):
    status_code = 404


class LessonNotFound(NotFound):
    def __init__(self, lesson_id: str) -> None:
        super().__init__("Lesson not found.")
        self.lesson_id = lesson_id


class NoPendingOrders(NotFound):
    """There is nothing to reconcile for a lesson."""

    def __init__(self, lesson_ref: str) -> None:
        super().__init__("No unfulfilled orders found for this lesson.")
        self.lesson_ref = lesson_ref


class StoreError(LessonBookingError):
    """The document store rejected an operation."""


class StoreUnavailable(StoreError):
    """The document store could not be reached."""


class LessonUpdateFailed(LessonBookingError):
    def __init__(self, lesson_id: str) -> None:
        super().__init__("Failed to update lesson.")
        self.lesson_id = lesson_id


class OrderUpdateFailed(LessonBookingError):
    def __init__(self, lesson_ref: str) -> None:
        super().__init__("Failed to update orders.")
        self.lesson_ref = lesson_ref


class ReconciliationConflict(LessonBookingError):
    """Concurrent reconciliations kept invalidating the lesson version."""

    status_code = 409

    def __init__(self, lesson_id: str, attempts: int) -> None:
        super().__init__(
            f"Lesson was modified concurrently; gave up after {attempts} attempts."
        )
        self.lesson_id = lesson_id
        self.attempts = attempts
